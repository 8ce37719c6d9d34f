import os
import re
import logging
from pathlib import Path
from packaging import version

from .process_management import Shell
from .runners.common import DefaultLogger, ShellFn
from .utils import NAME, VERSION

# flags that make each tool print its version
VERSION_FLAGS = {
    "megahit": ["--version"],
    "pigz": ["--version"],
    "gzip": ["--version"],
    "sample_seqs": ["--version"],
}

REQUIRED_VERSIONS = {
    "megahit": "1.0", # --presets and --continue
}

def IsExe(program: str|Path):
    return os.path.isfile(program) and os.access(program, os.X_OK)

def Which(program: str) -> str|None:
    f_path, _ = os.path.split(program)
    if f_path:
        if IsExe(program):
            return program
        return None
    for path in os.environ.get("PATH", "").split(os.pathsep):
        exe_file = os.path.join(path.strip('"'), program)
        if IsExe(exe_file):
            return exe_file
    return None

def FindExecutables(programs: dict[str, str]) -> dict[str, str]:
    """
    :param programs: maps tool names to a command name or path
    :return: tool names mapped to resolved executable paths
    :raises EnvironmentError: if any of them can't be found
    """
    executables = {}
    for name, program in programs.items():
        exe = Which(program)
        if exe is None:
            raise EnvironmentError(f"Unable to find executable for {name} [{program}]")
        executables[name] = exe
    return executables

def ParseVersion(text: str) -> str:
    version_re = re.compile(r"[Vv]\d+\.\d|[Vv]ersion:? \d\.\d|\d+\.\d+(\.\d+)?")
    for line in text.split("\n"):
        if not version_re.search(line): continue
        for word in line.split():
            if re.search(r"\d\.\d", word):
                return re.sub(r"[,:()[\]vV]", '', word)
    return ""

def FindDependencyVersions(exe_dict: dict[str, str], shell: ShellFn=Shell, log: logging.Logger|None=None) -> dict[str, str]:
    log = log if log is not None else DefaultLogger()
    versions = {}
    for exe, path in exe_dict.items():
        flags = VERSION_FLAGS.get(Path(path).name, VERSION_FLAGS.get(exe))
        if flags is None:
            log.warning(f"Unknown version command for {exe}")
            continue
        lines = []
        shell([path]+flags, lines.append, lines.append)
        versions[exe] = ParseVersion("".join(lines))
        if versions[exe] == "":
            log.debug(f"Unable to find version for {exe}")
    return versions

def ValidateDependencyVersions(dep_versions: dict[str, str], log: logging.Logger|None=None) -> bool:
    """
    :return: False if any tool with a minimum version is older than required,
    tools without a detected version are not held against
    """
    log = log if log is not None else DefaultLogger()
    ok = True
    for dep, min_v in REQUIRED_VERSIONS.items():
        found = dep_versions.get(dep, "")
        if found == "": continue
        try:
            too_old = version.parse(found) < version.parse(min_v)
        except version.InvalidVersion:
            log.warning(f"{dep} reported an unparseable version [{found}]")
            continue
        if too_old:
            log.warning(f"{dep} version found ('{found}') is not compatible with {NAME} - {min_v} or later required.")
            ok = False
    return ok

def SummarizeDependencyVersions(dep_versions: dict[str, str]) -> str:
    summary = f"{NAME} version {VERSION}\nSoftware versions used:\n"
    for exe in sorted(dep_versions):
        summary += f"\t{exe:<20}{dep_versions[exe]}\n"
    return summary
