import logging
from typing import Any

from pythonjsonlogger.json import JsonFormatter


class TaskwaitJsonFormatter(JsonFormatter):
    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]) -> None:
        """
        Override JsonFormatter to add level and logger name to emitted messages.
        """
        message_dict["level"] = record.levelname
        message_dict["logger"] = record.name

        super(TaskwaitJsonFormatter, self).add_fields(log_record, record, message_dict)
