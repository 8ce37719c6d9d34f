import shutil
from enum import Enum, auto
from pathlib import Path

from ..constants import CONTIGS_SUFFIX, CONTINUE_FLAG, INTERMEDIATE_CONTIGS, MEGAHIT_DEFAULT_LOG, MEGAHIT_DEFAULT_PREFIX, MEGAHIT_OPTS, PARALLEL_ZIP
from ..models import AssemblyOutputs, Preset, ReadInputs, RunnerResult
from ..process_management import ShellResult
from .common import DiagnosticLogger, Runner

class Attempt(Enum):
    FIRST_ATTEMPT = auto()
    RETRY = auto()
    SUCCESS = auto()
    TERMINAL_FAILURE = auto()

# (state, exited cleanly) -> next state
# nothing leads back to RETRY, so at most one retry can happen
TRANSITIONS = {
    (Attempt.FIRST_ATTEMPT, True):  Attempt.SUCCESS,
    (Attempt.FIRST_ATTEMPT, False): Attempt.RETRY,
    (Attempt.RETRY, True):          Attempt.SUCCESS,
    (Attempt.RETRY, False):         Attempt.TERMINAL_FAILURE,
}

def BuildMegahitCommand(exe: str|Path, reads: ReadInputs, out_dir: Path, out_prefix: str|None=None,
                        num_threads: int=1, preset: str|None=None) -> list[str]:
    cmd = [
        str(exe),
        "--num-cpu-threads", str(num_threads),
        "--out-dir", str(out_dir),
        "-1", str(reads.forward),
        "-2", str(reads.reverse),
        "-r", str(reads.single),
    ]
    if out_prefix is not None:
        cmd += ["--out-prefix", out_prefix]
    return cmd + Preset.Flags(preset)

def DiagnosticFiles(out_dir: Path, out_prefix: str|None=None):
    """Without a prefix megahit's own log name, "log", is used rather than ".log"."""
    log = MEGAHIT_DEFAULT_LOG if out_prefix is None else Path(f"{out_prefix}.log")
    return [out_dir.joinpath(MEGAHIT_OPTS), out_dir.joinpath(log)]

def FinalContigs(out_dir: Path, out_prefix: str|None=None):
    """
    Path megahit writes the final contigs to.
    Without a prefix this is megahit's default, final.contigs.fa, not a bare ".contigs.fa".
    """
    prefix = MEGAHIT_DEFAULT_PREFIX if out_prefix is None else out_prefix
    return out_dir.joinpath(f"{prefix}{CONTIGS_SUFFIX}")

class AssemblyRunner(Runner):
    def Run(self, exe: str|Path, reads: ReadInputs, out_dir: str|Path, out_prefix: str|None=None,
            num_threads: int=1, preset: str|None=None) -> RunnerResult:
        """
        Runs megahit, retrying once with --continue if the first attempt fails.

        The retry reuses out_dir, megahit resumes from the checkpoints the failed
        attempt left there. If the retry fails too, megahit's opts and log files are
        dumped to the log and out_dir is removed so that the same out_dir can be
        handed to this runner again.

        Tool failures come back as a non-zero exit_code, never as an exception.
        Errors starting the process (eg. missing executable) are raised.
        """
        out_dir = Path(out_dir)
        cmd = BuildMegahitCommand(exe, reads, out_dir, out_prefix, num_threads, preset)

        state = Attempt.FIRST_ATTEMPT
        status: ShellResult|None = None
        while state in {Attempt.FIRST_ATTEMPT, Attempt.RETRY}:
            attempt_cmd = cmd if state == Attempt.FIRST_ATTEMPT else cmd+[CONTINUE_FLAG]
            status = self.Invoke(attempt_cmd)
            state = TRANSITIONS[state, status.Succeeded()]
            if state == Attempt.RETRY:
                self.log.warning(f"assembly failed with exit code {status.returncode}, retrying with {CONTINUE_FLAG}")
        assert status is not None

        if state == Attempt.TERMINAL_FAILURE:
            self.log.error(f"assembly failed again with exit code {status.returncode}")
            DiagnosticLogger(self.log).LogFiles(DiagnosticFiles(out_dir, out_prefix))
            if out_dir.is_dir():
                shutil.rmtree(out_dir)
                self.log.info(f"removed [{out_dir}]")

        outputs = AssemblyOutputs(final_contigs=FinalContigs(out_dir, out_prefix))
        return RunnerResult.FromStatus(status, outputs)

def BuildZipCommand(zip_binary: str|Path, files: list[str], num_threads: int=1) -> list[str]:
    if Path(str(zip_binary)).name == PARALLEL_ZIP:
        return [str(zip_binary), "-p", str(num_threads)] + files
    return [str(zip_binary)] + files

class OutputDirCleaner(Runner):
    def CleanUp(self, zip_binary: str|Path, assembly_dir: str|Path, num_threads: int=1) -> ShellResult:
        """
        Removes intermediate contigs and compresses the final contigs of a finished assembly.
        The compression status is returned as is, the caller decides what a failure means.
        """
        assembly_dir = Path(assembly_dir)
        int_contig_dir = assembly_dir.joinpath(INTERMEDIATE_CONTIGS)
        if int_contig_dir.is_dir():
            shutil.rmtree(int_contig_dir)
            self.log.info(f"removed [{int_contig_dir}]")

        pattern = f"*{CONTIGS_SUFFIX}"
        matches = sorted(str(p) for p in assembly_dir.glob(pattern))
        # like an unmatched shell glob, pass the pattern through and let the tool complain
        files = matches if len(matches) > 0 else [str(assembly_dir.joinpath(pattern))]

        return self.Invoke(BuildZipCommand(zip_binary, files, num_threads))
