# This file is part of coutinho_assembly.
#
# coutinho_assembly is free software: you can redistribute it and/or modify it
# under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# coutinho_assembly is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with coutinho_assembly. If not, see <https://www.gnu.org/licenses/>.

import json
import os, sys
from pathlib import Path
import argparse
import inspect
import multiprocessing

from .constants import PARAMS_FILE, RESULT_FILE
from .dependencies import FindDependencyVersions, FindExecutables, SummarizeDependencyVersions, ValidateDependencyVersions
from .logging_utils import PrepLogging
from .models import Preset, ReadInputs
from .runners import AssemblyRunner, OutputDirCleaner, SubsampleRunner
from .utils import NAME, USER, VERSION, ENTRY_POINTS

CLI_ENTRY = ENTRY_POINTS[0].split(" ")[0]

class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(2, '\n%s: error: %s\n' % (self.prog, message))

def _add_reads(parser: argparse.ArgumentParser):
    reads = parser.add_argument_group(title="reads")
    reads.add_argument("-1", "--forward", metavar="FASTQ", required=True,
        help="forward paired-end reads")
    reads.add_argument("-2", "--reverse", metavar="FASTQ", required=True,
        help="reverse paired-end reads")
    reads.add_argument("-s", "--single", metavar="FASTQ", required=True,
        help="single-end (unpaired) reads")

def _add_common(parser: argparse.ArgumentParser):
    parser.add_argument("-t", "--threads", metavar="INT", type=int,
        help="threads, default:ALL", default=multiprocessing.cpu_count())
    parser.add_argument("--verbose", action="store_true", default=False, required=False,
        help="log the output of the external tools to the console")

class CommandLineInterface:
    def _get_fn_name(self):
        return inspect.stack()[1][3]

    def _parse(self, parser: ArgumentParser, raw_args):
        args = parser.parse_args(raw_args)

        input_error = False
        def _error(message: str):
            nonlocal input_error
            if not input_error:
                parser.print_help()
                print()
            print(f"Invalid input: {message}")
            input_error = True

        threads = getattr(args, "threads", None)
        if threads is not None and threads < 1:
            _error(f"threads must be at least 1, got [{threads}]")
        return args, input_error

    def _workspace(self, args, out: Path):
        # config echo, log and result sit beside the output folder since it may be removed
        ws = out.parent.absolute()
        if not ws.exists(): os.makedirs(ws)
        d = dict(args.__dict__)|dict(
            command=inspect.stack()[1][3],
            version=VERSION,
            current_directory=os.getcwd(),
        )
        for k in list(d):
            if d[k] is None: del d[k]
        name = out.name
        with open(ws.joinpath(f"{name}.{PARAMS_FILE}"), "w") as j:
            json.dump(d, j, indent=4)
        log = PrepLogging(ws.joinpath(f"{name}.log"), verbose=args.verbose)
        return ws, log

    def assemble(self, raw_args):
        parser = ArgumentParser(
            prog = f'{CLI_ENTRY} {self._get_fn_name()}',
            description="assemble with megahit, retrying once from its checkpoints if it fails",
        )
        _add_reads(parser)
        parser.add_argument("-o", "--output", metavar="PATH", required=True,
            help="megahit output folder, must not exist yet, removed if both attempts fail")
        parser.add_argument("-p", "--prefix", metavar="STR", required=False,
            help="prefix of megahit's output files")
        parser.add_argument("--preset", metavar="STR", required=False, default=Preset.DEFAULT,
            help=f"one of {Preset.CHOICES}, anything else uses the megahit defaults, default:{Preset.DEFAULT}")
        parser.add_argument("--megahit", metavar="EXE", required=False, default="megahit",
            help="megahit executable, default:megahit")
        parser.add_argument("--clean_up", action="store_true", default=False, required=False,
            help="after a successful assembly, remove intermediate contigs and compress the final contigs")
        parser.add_argument("--zip", metavar="EXE", required=False, default="pigz",
            help="compression tool used by --clean_up, default:pigz")
        _add_common(parser)
        args, input_error = self._parse(parser, raw_args)
        if input_error: sys.exit(2)

        out_dir = Path(args.output).absolute()
        ws, log = self._workspace(args, out_dir)
        reads = ReadInputs.Parse(args)

        result = AssemblyRunner(log=log).Run(
            exe=args.megahit,
            reads=reads,
            out_dir=out_dir,
            out_prefix=args.prefix,
            num_threads=args.threads,
            preset=args.preset,
        )
        result.Save(ws.joinpath(f"{out_dir.name}.{RESULT_FILE}"))
        if not result.Succeeded():
            log.error(f"assembly failed, exit code {result.exit_code}")
            sys.exit(result.exit_code)

        log.info(f"contigs: {result.outputs.final_contigs}")
        if args.clean_up:
            r = OutputDirCleaner(log=log).CleanUp(args.zip, out_dir, args.threads)
            if not r.Succeeded():
                log.error(f"compressing contigs failed, exit code {r.returncode}")
                sys.exit(r.returncode)

    def subsample(self, raw_args):
        parser = ArgumentParser(
            prog = f'{CLI_ENTRY} {self._get_fn_name()}',
            description="draw random subsamples of a read set",
        )
        _add_reads(parser)
        parser.add_argument("-o", "--output", metavar="PATH", required=True,
            help="output folder for the subsamples")
        parser.add_argument("-b", "--prefix", metavar="STR", required=False,
            help="prefix of output files, default:percent_<PERCENT>")
        parser.add_argument("-p", "--percent", metavar="INT", type=int, required=True,
            help="percent of reads to keep in each subsample")
        parser.add_argument("-n", "--num_subsamples", metavar="INT", type=int, required=True,
            help="number of subsamples to draw")
        parser.add_argument("--seed", metavar="INT", type=int, required=False,
            help="random seed, currently not passed on to the subsampler")
        parser.add_argument("--sample_seqs", metavar="EXE", required=False, default="sample_seqs",
            help="subsampler executable, default:sample_seqs")
        parser.add_argument("--verbose", action="store_true", default=False, required=False,
            help="log the output of the external tools to the console")
        args, input_error = self._parse(parser, raw_args)
        if args.num_subsamples < 1:
            print(f"Invalid input: num_subsamples must be at least 1, got [{args.num_subsamples}]")
            input_error = True
        if not 0 < args.percent <= 100:
            print(f"Invalid input: percent must be in (0, 100], got [{args.percent}]")
            input_error = True
        if input_error: sys.exit(2)

        out_dir = Path(args.output).absolute()
        ws, log = self._workspace(args, out_dir)
        result = SubsampleRunner(log=log).Run(
            exe=args.sample_seqs,
            reads=ReadInputs.Parse(args),
            out_dir=out_dir,
            sampling_percentage=args.percent,
            num_subsamples=args.num_subsamples,
            out_prefix=args.prefix,
            random_seed=args.seed,
        )
        result.Save(ws.joinpath(f"{out_dir.name}.{RESULT_FILE}"))
        if not result.Succeeded(): sys.exit(result.exit_code)

    def clean_up(self, raw_args):
        parser = ArgumentParser(
            prog = f'{CLI_ENTRY} {self._get_fn_name()}',
            description="remove intermediate contigs from a finished megahit folder and compress its contigs",
        )
        parser.add_argument("-i", "--input", metavar="PATH", required=True,
            help="megahit output folder")
        parser.add_argument("--zip", metavar="EXE", required=False, default="pigz",
            help="compression tool, default:pigz")
        _add_common(parser)
        args, input_error = self._parse(parser, raw_args)
        assembly_dir = Path(args.input).absolute()
        if not assembly_dir.is_dir():
            print(f"Invalid input: [{assembly_dir}] is not a folder")
            input_error = True
        if input_error: sys.exit(2)

        log = PrepLogging(verbose=args.verbose)
        r = OutputDirCleaner(log=log).CleanUp(args.zip, assembly_dir, args.threads)
        if not r.Succeeded(): sys.exit(r.returncode)

    def versions(self, raw_args):
        parser = ArgumentParser(
            prog = f'{CLI_ENTRY} {self._get_fn_name()}',
            description="find the external tools and check their versions",
        )
        parser.add_argument("--megahit", metavar="EXE", default="megahit")
        parser.add_argument("--sample_seqs", metavar="EXE", default="sample_seqs")
        parser.add_argument("--zip", metavar="EXE", default="pigz")
        parser.add_argument("--verbose", action="store_true", default=False)
        args, _ = self._parse(parser, raw_args)

        log = PrepLogging(verbose=args.verbose)
        try:
            exes = FindExecutables(dict(megahit=args.megahit, sample_seqs=args.sample_seqs, zip=args.zip))
        except EnvironmentError as e:
            log.error(str(e))
            sys.exit(3)
        found = FindDependencyVersions(exes, log=log)
        log.info(SummarizeDependencyVersions(found))
        if not ValidateDependencyVersions(found, log=log): sys.exit(3)

    def help(self, args=None):
        help = [
            f"{NAME} v{VERSION}",
            f"https://github.com/{USER}/{NAME}",
            f"",
            f"Syntax: {CLI_ENTRY} COMMAND [OPTIONS]",
            f"",
            f"Where COMMAND is one of:",
        ]+[f"- {k}" for k in COMMANDS]+[
            f"",
            f"for additional help, use:",
            f"{CLI_ENTRY} COMMAND -h/--help",
        ]
        help = "\n".join(help)
        print(help)
COMMANDS = {k:v for k, v in CommandLineInterface.__dict__.items() if k[0]!="_"}

def main():
    cli = CommandLineInterface()
    if len(sys.argv) <= 1:
        cli.help()
        return

    COMMANDS.get(# calls command function with args
        sys.argv[1],
        CommandLineInterface.help # default
    )(cli, sys.argv[2:]) # cli is instance of "self"

if __name__ == "__main__":
    main()
