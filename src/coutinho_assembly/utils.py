import os, sys
from pathlib import Path
import re

USER = "mooreryan" # github id
MODULE_ROOT = Path("/".join(os.path.realpath(__file__).split('/')[:-1]))
NAME = MODULE_ROOT.name.lower()
ENTRY_POINTS = [f"{e} = {NAME}.cli:main" for e in [NAME, "coa"]]

def _get_version() -> str:
    with open(MODULE_ROOT.joinpath("version.txt")) as v:
        return v.readline().strip()
VERSION = _get_version()

def regex(r, s):
    for m in re.finditer(r, s):
        yield s[m.start():m.end()]

if __name__ == "__main__":
    sys.path = [str(p) for p in set([
        MODULE_ROOT.parents[1]
    ]+sys.path)]
    from setup import SHORT_SUMMARY
    if len(sys.argv)>1:
        k = sys.argv[1]
        meta = dict(
            USER = USER,
            NAME = NAME,
            ENTRY_POINTS = ENTRY_POINTS,
            VERSION = VERSION,
            SHORT_SUMMARY = SHORT_SUMMARY,
            MODULE_ROOT = MODULE_ROOT,
        )
        print(meta.get(k, ""))
