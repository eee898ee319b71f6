import sys
from loguru import logger

_FORMAT = "{time:HH:mm:ss.SSS} | {level: <8} | {message}"


def setup_logging(level: str) -> None:
    logger.remove()
    # stderr is looked up per record, so redirected streams are honoured;
    # stdout stays free for the CLI's JSON report
    logger.add(
        lambda msg: sys.stderr.write(msg),
        level=level,
        format=_FORMAT,
        backtrace=False,
        diagnose=False,
    )
