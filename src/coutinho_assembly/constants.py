from pathlib import Path

# megahit output layout
MEGAHIT_OPTS = Path("opts.txt")
MEGAHIT_DEFAULT_PREFIX = "final"
MEGAHIT_DEFAULT_LOG = Path("log")
INTERMEDIATE_CONTIGS = Path("intermediate_contigs")
CONTIGS_SUFFIX = ".contigs.fa"
CONTINUE_FLAG = "--continue"

PARALLEL_ZIP = "pigz"

RESULT_FILE = Path("result.json")
PARAMS_FILE = Path("params.json")
