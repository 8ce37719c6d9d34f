import logging
import shlex
from pathlib import Path
from typing import Any, Callable, Iterable

from ..process_management import Shell, ShellResult, StripANSI
from ..utils import NAME

ShellFn = Callable[[list[str], Callable[[str], Any]|None, Callable[[str], Any]|None], ShellResult]

def DefaultLogger():
    return logging.getLogger(NAME)

class DiagnosticLogger:
    """Dumps whole files into the log at ERROR level, one record per file that exists."""
    def __init__(self, log: logging.Logger|None=None) -> None:
        self.log = log if log is not None else DefaultLogger()

    def LogFiles(self, paths: Iterable[Path|str]):
        logged = 0
        for p in paths:
            p = Path(p)
            if not p.is_file(): continue
            # megahit echoes read paths into opts.txt, which need not be utf-8
            with open(p, "rt", encoding="utf-8", errors="replace") as f:
                contents = f.read().rstrip("\n")
            self.log.error(contents)
            logged += 1
        return logged

class Runner:
    def __init__(self, shell: ShellFn=Shell, log: logging.Logger|None=None) -> None:
        self.log = log if log is not None else DefaultLogger()
        self._shell = shell

    def _on_line(self, line: str):
        line = StripANSI(line).rstrip()
        if len(line) > 0: self.log.debug(line)

    def Invoke(self, cmd: list[str]) -> ShellResult:
        self.log.info(f"running: {' '.join(shlex.quote(str(c)) for c in cmd)}")
        r = self._shell(cmd, self._on_line, lambda x: self._on_line(f"ERR: {x}"))
        if r.killed:
            self.log.warning(f"[{Path(str(cmd[0])).name}] was killed by signal {r.signal}")
        else:
            self.log.debug(f"[{Path(str(cmd[0])).name}] exited with code {r.exit_code}")
        return r
