from pathlib import Path

from ..models import ReadInputs, RunnerResult, SubsampleFiles, SubsampleOutputs
from .common import Runner

def DefaultPrefix(sampling_percentage: int):
    # zero padded so single digit percentages sort properly
    return f"percent_{int(sampling_percentage):02d}"

def SubsampleFileNames(out_dir: Path, out_prefix: str, num_subsamples: int):
    names = {}
    for i in range(num_subsamples):
        base = f"{out_prefix}.sample_{i}"
        names[i] = SubsampleFiles(
            forward_reads=out_dir.joinpath(f"{base}.1.fq"),
            reverse_reads=out_dir.joinpath(f"{base}.2.fq"),
            single_reads=out_dir.joinpath(f"{base}.U.fq"),
        )
    return names

def BuildSampleSeqsCommand(exe: str|Path, reads: ReadInputs, out_dir: Path, out_prefix: str,
                           sampling_percentage: int, num_subsamples: int) -> list[str]:
    return [
        str(exe),
        "-1", str(reads.forward),
        "-2", str(reads.reverse),
        "-s", str(reads.single),
        "-p", str(sampling_percentage),
        "-n", str(num_subsamples),
        "-o", str(out_dir),
        "-b", out_prefix,
    ]

class SubsampleRunner(Runner):
    def Run(self, exe: str|Path, reads: ReadInputs, out_dir: str|Path, sampling_percentage: int,
            num_subsamples: int, out_prefix: str|None=None, random_seed: int|None=None) -> RunnerResult:
        """Runs the subsampler once, no retries."""
        out_dir = Path(out_dir)
        if out_prefix is None: out_prefix = DefaultPrefix(sampling_percentage)

        # TODO: random_seed is accepted but sample_seqs is never given it, runs are not reproducible yet
        cmd = BuildSampleSeqsCommand(exe, reads, out_dir, out_prefix, sampling_percentage, num_subsamples)
        outputs = SubsampleOutputs(
            out_dir=out_dir,
            subsample_file_names=SubsampleFileNames(out_dir, out_prefix, num_subsamples),
        )

        status = self.Invoke(cmd)
        if not status.Succeeded():
            self.log.error(f"subsampling failed with exit code {status.returncode}")
        return RunnerResult.FromStatus(status, outputs)
