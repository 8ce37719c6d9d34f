import logging
import unittest

from coutinho_assembly.logging_utils import LevelFormatter, PrepLogging

def _record(level, msg, name="coutinho_assembly"):
    return logging.makeLogRecord(dict(name=name, levelno=level, levelname=logging.getLevelName(level), msg=msg))

class TestLevelFormatter(unittest.TestCase):
    def setUp(self) -> None:
        self.fmt = LevelFormatter()

    def test_info_is_bare(self):
        self.assertEqual("contigs: /asm/apple.contigs.fa", self.fmt.format(_record(logging.INFO, "contigs: /asm/apple.contigs.fa")))

    def test_debug_stays_on_one_line(self):
        out = self.fmt.format(_record(logging.DEBUG, "ERR: --- [STAT] 120 reads"))
        self.assertEqual(1, len(out.split("\n")))
        self.assertTrue(out.endswith(" | ERR: --- [STAT] 120 reads"))

    def test_warning(self):
        self.assertEqual("WARNING: retrying", self.fmt.format(_record(logging.WARNING, "retrying")))

    def test_error_dump_is_indented(self):
        out = self.fmt.format(_record(logging.ERROR, "attempt 1\nattempt 2", name="coutinho_assembly.megahit"))
        self.assertEqual("ERROR - coutinho_assembly.megahit:\n    attempt 1\n    attempt 2", out)

    def test_critical_uses_error_layout(self):
        out = self.fmt.format(_record(logging.CRITICAL, "gone"))
        self.assertEqual("CRITICAL - coutinho_assembly:\n    gone", out)

    def test_prep_logging_replaces_handlers(self):
        log = PrepLogging(verbose=True)
        log = PrepLogging(verbose=False)
        self.assertEqual(1, len(log.handlers))
        self.assertEqual(logging.INFO, log.handlers[0].level)
        self.assertIsInstance(log.handlers[0].formatter, LevelFormatter)

if __name__ == '__main__':
    unittest.main()
