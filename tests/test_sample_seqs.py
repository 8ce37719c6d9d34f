import logging
import unittest
from pathlib import Path

from coutinho_assembly.models import ReadInputs, SubsampleFiles
from coutinho_assembly.runners import SubsampleRunner
from coutinho_assembly.runners.sample_seqs import DefaultPrefix, SubsampleFileNames
from fakes import FakeShell

READS = ReadInputs(Path("/reads/r1.fq"), Path("/reads/r2.fq"), Path("/reads/u.fq"))
OUT = Path("/subsamples")

class TestSubsampleRunner(unittest.TestCase):
    def setUp(self) -> None:
        self.log = logging.getLogger("coutinho_assembly.test.subsample")

    def test_default_prefix(self):
        self.assertEqual("percent_07", DefaultPrefix(7))
        self.assertEqual("percent_42", DefaultPrefix(42))
        self.assertEqual("percent_100", DefaultPrefix(100))

    def test_command(self):
        shell = FakeShell([0])
        SubsampleRunner(shell, self.log).Run("sample_seqs", READS, OUT, 7, 3)
        self.assertEqual([[
            "sample_seqs",
            "-1", "/reads/r1.fq",
            "-2", "/reads/r2.fq",
            "-s", "/reads/u.fq",
            "-p", "7",
            "-n", "3",
            "-o", "/subsamples",
            "-b", "percent_07",
        ]], shell.calls)

    def test_random_seed_is_not_passed_on(self):
        with_seed, without = FakeShell([0]), FakeShell([0])
        SubsampleRunner(with_seed, self.log).Run("sample_seqs", READS, OUT, 7, 3, random_seed=1234)
        SubsampleRunner(without, self.log).Run("sample_seqs", READS, OUT, 7, 3)
        self.assertEqual(without.calls, with_seed.calls)

    def test_subsample_file_names(self):
        r = SubsampleRunner(FakeShell([0]), self.log).Run("sample_seqs", READS, OUT, 25, 4, out_prefix="apple")
        names = r.outputs.subsample_file_names
        self.assertEqual(OUT, r.outputs.out_dir)
        self.assertEqual([0, 1, 2, 3], sorted(names))
        self.assertEqual(SubsampleFiles(
            forward_reads=OUT.joinpath("apple.sample_2.1.fq"),
            reverse_reads=OUT.joinpath("apple.sample_2.2.fq"),
            single_reads=OUT.joinpath("apple.sample_2.U.fq"),
        ), names[2])

    def test_single_attempt_on_failure(self):
        shell = FakeShell([1])
        with self.assertLogs(self.log, level="ERROR"):
            r = SubsampleRunner(shell, self.log).Run("sample_seqs", READS, OUT, 10, 2)
        self.assertEqual(1, len(shell.calls))
        self.assertEqual(1, r.exit_code)
        self.assertFalse(r.Succeeded())
        # paths are reported even though nothing was written
        self.assertEqual(OUT.joinpath("percent_10.sample_1.U.fq"), r.outputs.subsample_file_names[1].single_reads)

    def test_no_subsamples(self):
        self.assertEqual({}, SubsampleFileNames(OUT, "percent_10", 0))

    def test_paths_are_pure(self):
        self.assertEqual(SubsampleFileNames(OUT, "x", 3), SubsampleFileNames(OUT, "x", 3))

if __name__ == '__main__':
    unittest.main()
