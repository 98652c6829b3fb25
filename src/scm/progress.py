"""Progress notification for repository backends."""

import logging
from typing import Protocol


class ProgressListener(Protocol):
    """Observer of backend progress.

    ``info`` messages are always surfaced, ``debug`` messages only in
    verbose mode.
    """

    def info(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...


class LoggingProgressListener:
    """Forward progress messages to a logger.

    Messages carry log output, paths and branch names verbatim, so they are
    never rendered as rich markup.
    """

    def __init__(self, logger: logging.Logger, verbose: bool = False):
        self.logger = logger
        self.verbose = verbose

    def info(self, message: str) -> None:
        self.logger.info(message, extra={"markup": False})

    def debug(self, message: str) -> None:
        if self.verbose:
            self.logger.debug(message, extra={"markup": False})
