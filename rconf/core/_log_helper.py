import logging

ROOT_LOGGER_NAME = "rconf"


def get_logger(name: str | None = None) -> logging.Logger:
    if name is None or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def warn(message: str, *args, logger: logging.Logger | None = None) -> None:
    (logger or get_logger()).warning(message, *args)


logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())
