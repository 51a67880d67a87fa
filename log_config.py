import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from config import SERVICE_NAME


class ServiceJSONFormatter(JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds")
        log_record["level"] = record.levelname.lower()
        log_record["service"] = log_record.get("service") or SERVICE_NAME
        log_record.pop("levelname", None)
        log_record.pop("asctime", None)


def configure_logging(service: str, json_mode: bool, level: str = "INFO") -> None:
    """ Installs a single stdout handler on the root logger; later calls are no-ops """
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    if json_mode:
        handler.setFormatter(ServiceJSONFormatter(
            "%(timestamp)s %(level)s %(service)s %(name)s %(message)s", static_fields={"service": service}))
    else:
        handler.setFormatter(logging.Formatter(fmt="%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root.setLevel(level.upper())
    root.addHandler(handler)

    # werkzeug prints its own access log, route it through the same handler
    werkzeug_log = logging.getLogger("werkzeug")
    werkzeug_log.handlers = [handler]
    werkzeug_log.propagate = False
