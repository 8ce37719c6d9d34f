#!/usr/bin/env python3
"""
Mimics the parts of megahit the assembly runner relies on.

  - refuses an existing --out-dir unless --continue is given
  - writes opts.txt and <prefix>.log into the output folder on every attempt
  - fails the first FAKE_MEGAHIT_FAILURES attempts (default 0), then writes
    <prefix>.contigs.fa and intermediate_contigs/
"""
import argparse
import os
import sys
from pathlib import Path

parser = argparse.ArgumentParser()
parser.add_argument("--num-cpu-threads", type=int, default=1)
parser.add_argument("--out-dir", required=True)
parser.add_argument("--out-prefix", default="final")
parser.add_argument("-1", dest="forward")
parser.add_argument("-2", dest="reverse")
parser.add_argument("-r", dest="single")
parser.add_argument("--presets")
parser.add_argument("--k-list")
parser.add_argument("--continue", dest="resume", action="store_true")
args = parser.parse_args()

out = Path(args.out_dir)
if out.exists() and not args.resume:
    sys.stderr.write(f"Output directory {out} already exists, please change the parameter -o to another value to avoid overwriting.\n")
    sys.exit(1)
os.makedirs(out, exist_ok=True)

counter = out.joinpath(".attempts")
attempt = int(counter.read_text() or 0) + 1 if counter.exists() else 1
counter.write_text(str(attempt))

log_name = "log" if args.out_prefix == "final" else f"{args.out_prefix}.log"
with open(out.joinpath("opts.txt"), "w") as f:
    f.write(" ".join(sys.argv[1:]) + "\n")
with open(out.joinpath(log_name), "a") as f:
    f.write(f"attempt {attempt}\n")

print(f"MEGAHIT v1.2.9 attempt {attempt}")
if attempt <= int(os.environ.get("FAKE_MEGAHIT_FAILURES", "0")):
    sys.stderr.write("Error occurs, please refer to the log\n")
    sys.exit(255)

os.makedirs(out.joinpath("intermediate_contigs"), exist_ok=True)
out.joinpath("intermediate_contigs", "k21.contigs.fa").write_text(">k21_1\nACGT\n")
out.joinpath(f"{args.out_prefix}.contigs.fa").write_text(">k141_1\nACGTACGT\n")
