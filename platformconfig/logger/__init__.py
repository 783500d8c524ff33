from .logger import MultiLineFormatter, get_logger  # noqa: F401
