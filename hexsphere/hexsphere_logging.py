"""This provides logging functionality for hexsphere.

It is modeled on the default `logging approach that comes with Python <https://docs.python.org/library/logging.html>`_.
All loggers are children of the ``HEXSPHERE`` logger, so a single call to
:func:`log_to_stderr` makes every pipeline step visible.

"""

import inspect
import logging
from functools import wraps
from logging import DEBUG, INFO

__all__ = [
    "DEBUG",
    "DEFAULT_LEVEL",
    "INFO",
    "LOGGER_NAME",
    "create_module_logger",
    "function_logger",
    "get_module_logger",
    "get_rootlogger",
    "log_to_stderr",
    "method_logger",
]
LOGGER_NAME = "HEXSPHERE"
DEFAULT_LEVEL = DEBUG

_rootlogger = None
_module_loggers = {}


def create_module_logger(name: str | None = None):
    """Helper function for creating a module logger.

    Args:
        name (str): The name to be given to the logger. If the name is None, the name defaults to the name of the module.

    """
    if name is None:
        frm = inspect.stack()[1]
        mod = inspect.getmodule(frm[0])
        name = mod.__name__
    logger = logging.getLogger(f"{LOGGER_NAME}.{name}")

    _module_loggers[name] = logger
    return logger


def get_module_logger(name: str):
    """Helper function for getting the module logger.

    Args:
        name (str): The name of the module in which the method being decorated is located

    """
    try:
        logger = _module_loggers[name]
    except KeyError:
        logger = create_module_logger(name)

    return logger


_logger = get_module_logger(__name__)


def method_logger(name: str):
    """Decorator for adding logging to a method.

    Args:
        name (str): The name of the module in which the method being decorated is located

    """
    logger = get_module_logger(name)
    classname = inspect.getouterframes(inspect.currentframe())[1][3]

    def real_decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            # the instance is the first positional argument
            logger.debug(
                f"calling {classname}.{func.__name__} with {args[1::]} and {kwargs}"
            )
            res = func(*args, **kwargs)
            return res

        return wrapper

    return real_decorator


def function_logger(name):
    """Decorator for adding logging to a Function.

    Args:
        name (str): The name of the module in which the function being decorated is located

    """
    logger = get_module_logger(name)

    def real_decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"calling {func.__name__} with {args} and {kwargs}")
            res = func(*args, **kwargs)
            return res

        return wrapper

    return real_decorator


def get_rootlogger():
    """Return the root logger configured by :func:`log_to_stderr`, if any."""
    return _rootlogger


def log_to_stderr(level: int | None = None, pass_root_logger_level: bool = False):
    """Log to stderr at the specified level.

    Args:
        level: the logging level, defaults to DEFAULT_LEVEL
        pass_root_logger_level: also set the level of the python root logger

    Returns:
        the ``HEXSPHERE`` logger

    """
    global _rootlogger

    if level is None:
        level = DEFAULT_LEVEL

    formatter = logging.Formatter(
        "[%(levelname)s][%(asctime)s][%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # avoid stacking handlers when called repeatedly
    if not any(getattr(h, "_hexsphere_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        handler._hexsphere_handler = True
        logger.addHandler(handler)

    if pass_root_logger_level:
        logging.getLogger().setLevel(level)

    _rootlogger = logger
    _logger.debug(f"logging to stderr at level {logging.getLevelName(level)}")
    return logger
