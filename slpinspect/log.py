import logging
import os

_COLORS = {
    "DEBUG": "\x1b[36m",
    "INFO": "\x1b[32m",
    "WARNING": "\x1b[33m",
    "ERROR": "\x1b[31m",
    "CRITICAL": "\x1b[1;31m",
}

_old_factory = logging.getLogRecordFactory()


def record_factory(*args, **kwargs):
    record = _old_factory(*args, **kwargs)
    color = _COLORS.get(record.levelname)
    record.levelname_colored = f"{color}{record.levelname}\x1b[0m" if color else record.levelname
    return record


logging.setLogRecordFactory(record_factory)
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
    format="%(levelname_colored)s: %(message)s",
)
log = logging.getLogger("slpinspect")


def set_verbosity(verbosity: int):
    """Maps a count of `-v` flags onto a log level. Zero leaves the `LOG_LEVEL` setting alone."""
    if verbosity <= 0:
        return
    log.setLevel(logging.INFO if verbosity == 1 else logging.DEBUG)
