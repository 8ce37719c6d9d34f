import logging
from pathlib import Path

from .utils import NAME

class LevelFormatter(logging.Formatter):
    """
    Console formatter, each level gets its own layout.

    DEBUG records are mostly single lines of child process output, so they stay on one
    line behind a timestamp. ERROR records can be whole diagnostic files, their lines
    are indented under a header naming the logger.
    """

    FORMATS = {
        logging.DEBUG:   "%(asctime)s | %(message)s",
        logging.INFO:    "%(message)s",
        logging.WARNING: "%(levelname)s: %(message)s",
        logging.ERROR:   "%(levelname)s - %(name)s:\n%(message)s",
    }
    DATEFMT = "%d/%m %H:%M:%S"
    INDENT = "    "

    def __init__(self):
        super().__init__(fmt="%(levelname)s: %(message)s", datefmt=self.DATEFMT)
        self._by_level = {lvl: logging.Formatter(fmt, datefmt=self.DATEFMT) for lvl, fmt in self.FORMATS.items()}

    def format(self, record):
        # custom levels fall back to the nearest standard level below them
        level = max([lvl for lvl in self.FORMATS if lvl <= record.levelno], default=logging.DEBUG)
        result = self._by_level[level].format(record)
        header, _, body = result.partition("\n")
        if level == logging.ERROR and body != "":
            result = "\n".join([header]+[self.INDENT+l for l in body.split("\n")])
        return result

def PrepLogging(log_file: str|Path|None=None, verbose=False) -> logging.Logger:
    """
    Sends the package logger to the console, and to log_file at DEBUG if one is given.
    Safe to call more than once, old handlers are replaced.
    """
    log = logging.getLogger(NAME)
    log.setLevel(logging.DEBUG)
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, mode='a')
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(
            fmt='%(asctime)s %(levelname)s: %(message)s',
            datefmt='%H:%M:%S',
        ))
        log.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(LevelFormatter())
    log.addHandler(ch)
    return log
