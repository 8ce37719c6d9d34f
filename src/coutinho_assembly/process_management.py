import os
import re
import signal
from dataclasses import dataclass
from typing import IO, Any, Callable
from threading import Thread
import subprocess

@dataclass
class ShellResult:
    killed: bool
    exit_code: int|None
    signal: int|None = None

    # shell convention, a child ended by signal N reports 128+N
    @property
    def returncode(self) -> int:
        if self.exit_code is not None: return self.exit_code
        assert self.signal is not None
        return 128 + self.signal

    def Succeeded(self):
        return self.exit_code == 0

# example: colors, escape, control sequences
# https://stackoverflow.com/questions/14693701/how-can-i-remove-the-ansi-escape-sequences-from-a-string-in-python
def StripANSI(s: str):
    return re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])').sub('', s)

def Shell(cmd: list[str], on_out: Callable[[str], Any]|None=None, on_err: Callable[[str], Any]|None=None) -> ShellResult:
    """
    Runs cmd as a child process and blocks until it terminates.

    cmd is an argument vector, it is never handed to a shell, so paths need no quoting.
    Failure to start the process (missing executable, permission denied) raises the
    OSError from subprocess unchanged. On KeyboardInterrupt the child's process group
    is sent SIGTERM and the interrupt is re-raised.
    """
    cmd = [str(c) for c in cmd]
    with LiveProcess(cmd) as proc:
        if on_out is not None: proc.RegisterOnOut(on_out)
        if on_err is not None: proc.RegisterOnErr(on_err)
        proc.Start()
        try:
            rc = proc.Wait()
        except KeyboardInterrupt:
            try:
                os.killpg(os.getpgid(proc.pid), signal.SIGTERM)
            except ProcessLookupError:
                pass
            raise

    if rc < 0:
        return ShellResult(killed=True, exit_code=None, signal=-rc)
    return ShellResult(killed=False, exit_code=rc)

class LiveProcess:
    ENCODING = "utf-8"

    def __init__(self, cmd: list[str]) -> None:
        # raises here if the executable can't be run
        self._console = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            close_fds=True,
            start_new_session=True,
        )
        self.pid = self._console.pid
        self._on_out_callbacks: list[Callable[[str], Any]] = []
        self._on_err_callbacks: list[Callable[[str], Any]] = []
        self._workers: list[Thread] = []

    def Decode(self, payload: bytes):
        return payload.decode(encoding=self.ENCODING, errors="replace")

    def RegisterOnOut(self, callback: Callable[[str], Any]):
        self._on_out_callbacks.append(callback)

    def RegisterOnErr(self, callback: Callable[[str], Any]):
        self._on_err_callbacks.append(callback)

    def Start(self):
        def reader(io: IO[bytes], callbacks):
            # pipes must always be drained, or a chatty child blocks on a full buffer
            for line in iter(io.readline, b''):
                text = self.Decode(line)
                for cb in callbacks: cb(text)
            io.close()

        for io, callbacks in [
            (self._console.stdout, self._on_out_callbacks),
            (self._console.stderr, self._on_err_callbacks),
        ]:
            assert io is not None
            self._workers.append(Thread(target=reader, args=[io, callbacks], daemon=True))
        for w in self._workers:
            w.start()

    def Wait(self) -> int:
        rc = self._console.wait()
        for w in self._workers:
            w.join()
        return rc

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.Dispose()
        return

    def Dispose(self):
        if self._console.poll() is None:
            self._console.terminate()
            self._console.wait()
        for w in self._workers:
            w.join(timeout=1)
