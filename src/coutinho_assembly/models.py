import os
from dataclasses import dataclass, field
from pathlib import Path
import json

from .process_management import ShellResult

class Saveable:
    def ToDict(self):
        def _can_save(k, v):
            if k.upper() == k: return False
            if callable(v): return False
            if isinstance(k, str) and k[0] == "_": return False
            return True

        def _stringyfy(v):
            if isinstance(v, Saveable):
                return v.ToDict()
            elif isinstance(v, list):
                return [_stringyfy(x) for x in v]
            elif isinstance(v, dict):
                return {str(k):_stringyfy(x) for k, x in v.items()}
            elif isinstance(v, (bool, int)) or v is None:
                return v
            else:
                return str(v)
        return {k:_stringyfy(v) for k, v in self.__dict__.items() if _can_save(k, v)}

    def Save(self, path: str|Path):
        path = Path(path)
        if not path.parent.exists(): os.makedirs(path.parent)
        with open(path, "w") as j:
            json.dump(self.ToDict(), j, indent=4)

@dataclass
class ReadInputs(Saveable):
    forward: Path
    reverse: Path
    single: Path

    @classmethod
    def Parse(cls, args):
        # no existence checks, the tools reject bad inputs themselves
        return cls(
            forward=Path(args.forward),
            reverse=Path(args.reverse),
            single=Path(args.single),
        )

class Preset:
    DEFAULT = "default"
    META_SENSITIVE = "meta-sensitive"
    META_LARGE = "meta-large"
    FAST = "fast"
    CHOICES = [DEFAULT, META_SENSITIVE, META_LARGE, FAST]

    # anything not listed here, "default" included, gets megahit's own defaults
    FLAGS = {
        META_SENSITIVE: ["--presets", META_SENSITIVE],
        META_LARGE:     ["--presets", META_LARGE],
        FAST:           ["--k-list", "21"],
    }

    @classmethod
    def Flags(cls, preset: str|None) -> list[str]:
        return list(cls.FLAGS.get(preset, [])) if preset is not None else []

@dataclass
class AssemblyOutputs(Saveable):
    final_contigs: Path

@dataclass
class SubsampleFiles(Saveable):
    forward_reads: Path
    reverse_reads: Path
    single_reads: Path

@dataclass
class SubsampleOutputs(Saveable):
    out_dir: Path
    subsample_file_names: dict[int, SubsampleFiles] = field(default_factory=dict)

@dataclass
class RunnerResult(Saveable):
    """
    Outcome of one supervised invocation.

    outputs holds the paths the runner expects given its inputs. They are computed
    whether or not the tool succeeded, so they don't imply the files exist.
    """
    status: ShellResult
    exit_code: int
    outputs: AssemblyOutputs|SubsampleOutputs

    @classmethod
    def FromStatus(cls, status: ShellResult, outputs: AssemblyOutputs|SubsampleOutputs):
        return cls(status, status.returncode, outputs)

    def Succeeded(self):
        return self.exit_code == 0

    def ToDict(self):
        return dict(
            killed=self.status.killed,
            signal=self.status.signal,
            exit_code=self.exit_code,
            outputs=self.outputs.ToDict(),
        )
