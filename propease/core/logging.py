# propease/core/logging.py
import logging
import sys

from pythonjsonlogger import jsonlogger

from propease.core.config import Settings

# libraries that are chatty at INFO and add nothing to the request trail
QUIET_LOGGERS = ("sqlalchemy.engine", "passlib", "multipart", "python_multipart")


class ServiceContextFilter(logging.Filter):
    """
    Stamps every record with the service name and environment, and makes
    sure `request_id` is always present so log queries can group by it.
    """

    def __init__(self, service: str, environment: str):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment
        if not hasattr(record, "request_id"):
            record.request_id = None
        return True


def configure_logging(settings: Settings) -> None:
    """
    One JSON line per record on stdout. Services log workflow steps with
    `extra=` ids (enquiry_id, property_id, ...); the request middleware adds
    one access line per request.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s",
            rename_fields={"levelname": "level", "name": "logger", "asctime": "ts"},
        )
    )
    handler.addFilter(ServiceContextFilter(settings.app_name, settings.environment))

    root = logging.getLogger()
    root.setLevel(level)
    # reloads (uvicorn --reload, tests) must not stack handlers
    root.handlers = [handler]

    for name in ("uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
