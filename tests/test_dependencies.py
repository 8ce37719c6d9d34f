import logging
import os
import sys
import unittest

from coutinho_assembly.dependencies import (
    FindDependencyVersions, FindExecutables, ParseVersion, SummarizeDependencyVersions, ValidateDependencyVersions, Which,
)
from coutinho_assembly.process_management import ShellResult

class TestDependencies(unittest.TestCase):
    def setUp(self) -> None:
        self.log = logging.getLogger("coutinho_assembly.test.deps")

    def test_parse_version(self):
        self.assertEqual("1.2.9", ParseVersion("MEGAHIT v1.2.9\n"))
        self.assertEqual("2.6", ParseVersion("pigz 2.6\n"))
        self.assertEqual("1.12", ParseVersion("gzip 1.12\nCopyright (C) 2018 Free Software Foundation, Inc.\n"))
        self.assertEqual("", ParseVersion("usage: sample_seqs [options]\n"))

    def test_validate_dependency_versions(self):
        self.assertTrue(ValidateDependencyVersions({"megahit": "1.2.9"}, self.log))
        self.assertTrue(ValidateDependencyVersions({"megahit": ""}, self.log))
        with self.assertLogs(self.log, level="WARNING"):
            self.assertFalse(ValidateDependencyVersions({"megahit": "0.3.3"}, self.log))

    def test_find_dependency_versions(self):
        calls = []
        def _shell(cmd, on_out=None, on_err=None):
            calls.append(cmd)
            on_out("MEGAHIT v1.2.9\n")
            return ShellResult(False, 0)
        found = FindDependencyVersions({"megahit": "/opt/bin/megahit", "mystery": "/opt/bin/mystery"}, _shell, self.log)
        self.assertEqual({"megahit": "1.2.9"}, found)
        self.assertEqual([["/opt/bin/megahit", "--version"]], calls)

    def test_summary(self):
        summary = SummarizeDependencyVersions({"pigz": "2.6", "megahit": "1.2.9"})
        lines = summary.split("\n")
        self.assertTrue(lines[2].strip().startswith("megahit"))
        self.assertTrue(lines[3].strip().startswith("pigz"))

    def test_which(self):
        self.assertEqual(sys.executable, Which(sys.executable))
        self.assertIsNone(Which(os.path.join(os.path.dirname(sys.executable), "no_such_program")))
        with self.assertRaises(EnvironmentError):
            FindExecutables({"megahit": "no_such_program_for_sure"})

if __name__ == '__main__':
    unittest.main()
