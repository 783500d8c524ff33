import logging

module_logger = logging.getLogger('platformconfig')


def get_logger(suffix: str = '') -> logging.Logger:
    """get a child logger from platformconfig, returning the parent logger if suffix is not given."""
    if not suffix:
        return module_logger
    return module_logger.getChild(suffix)


class MultiLineFormatter(logging.Formatter):
    """indent for multiple lines

    logging output:

    ::

        [2026-10-19 13:05:17] DEBUG - Decoded PLATFORM_ROUTES:
            https://www.example.com/
            https://example.com/

    """

    def format(self, record: logging.LogRecord) -> str:
        s = super().format(record)
        return s.replace('\n', '\n    ')
