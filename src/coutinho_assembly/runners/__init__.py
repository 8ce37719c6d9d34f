from .common import DiagnosticLogger
from .megahit import AssemblyRunner, OutputDirCleaner
from .sample_seqs import SubsampleRunner
