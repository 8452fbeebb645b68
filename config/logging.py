# config/logging.py
import logging


def configure_logging(level: str | int = logging.INFO, *, force: bool = False) -> None:
    """
    Initialise the root logger once with a terse format.
    Pass force=True to reconfigure (tests, alternate entry points).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    # httpx logs every request at INFO; keep it for debugging only.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
