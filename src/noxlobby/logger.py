import logging

_LOGGERS = {}

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Create or retrieve a named logger.

    Loggers under the ``noxlobby`` namespace propagate to the package root
    logger, which owns the console handler (see setup_logging). Without
    setup_logging they follow whatever the embedding application configured.
    """
    if name in _LOGGERS:
        return _LOGGERS[name]

    logger = logging.getLogger(name)
    _LOGGERS[name] = logger
    return logger


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Install the console handler on the package root logger."""
    root = logging.getLogger("noxlobby")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(getattr(h, "_noxlobby", False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        console._noxlobby = True
        root.addHandler(console)
        root.propagate = False

    return root
