import logging
import sys

_FORMAT = "%(asctime)s [%(levelname)s] (%(threadName)s) %(message)s"
# chatty at INFO/DEBUG: request lines, pdf parsing internals
_QUIET_LOGGERS = ("httpx", "openai", "pdfminer", "PIL", "multipart")


class Log:
    """Service-wide logging facade.

    Pipeline work runs on worker threads, so every line carries the thread
    name next to the request id the callers put in the message.
    """

    _logger: logging.Logger = logging.getLogger("docarchive")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Attach the stdout handler once and set levels from settings."""
        level = log_level.upper()
        cls._logger.setLevel(level)
        cls._logger.propagate = False
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(_FORMAT))
            cls._logger.addHandler(handler)
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(logging.WARNING, cls._logger.level))

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Verbose diagnostics, such as raw provider answers."""
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Stage outcomes and lifecycle events."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Rejected input and recoverable trouble."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Failed requests, with the internal cause."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Error with the active exception's traceback attached."""
        cls._logger.exception(message, extra=kwargs)
