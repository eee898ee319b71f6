import sys
from loguru import logger


def setup_logging(level: str, service: str) -> None:
    logger.remove()
    # Every record carries the service name in its "extra" block
    logger.configure(extra={"service": service})
    logger.add(
        sys.stdout,
        level=level,
        serialize=True,  # JSON logs
        backtrace=False,
        diagnose=False,
        enqueue=True,
    )
