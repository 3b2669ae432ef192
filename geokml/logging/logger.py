import logging
import sys

LOGGER_NAME = "geokml"
LOG_FORMAT = "%(asctime)s [%(levelname)s] (%(threadName)s) %(message)s"


class Log:
    """Process-wide logging facade.

    The worker thread and the API event loop share one logger; the format
    carries the thread name so their lines can be told apart. Keyword
    arguments are appended to the message as ``key=value`` pairs, e.g.
    ``Log.info("Job completed", job_id=job.id)``.
    """

    _logger: logging.Logger = logging.getLogger(LOGGER_NAME)

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a single stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._emit(logging.INFO, message, context)

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._emit(logging.WARNING, message, context)

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._emit(logging.ERROR, message, context)

    @classmethod
    def exception(cls, message: str, **context: object) -> None:
        """Log at ERROR with the traceback of the exception being handled."""
        cls._emit(logging.ERROR, message, context, exc_info=True)

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._emit(logging.DEBUG, message, context)

    @classmethod
    def _emit(
        cls,
        level: int,
        message: str,
        context: dict[str, object],
        exc_info: bool = False,
    ) -> None:
        if not cls._logger.isEnabledFor(level):
            return
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} {pairs}"
        # stacklevel points records at the Log.<level> caller
        cls._logger.log(level, message, exc_info=exc_info, stacklevel=3)
