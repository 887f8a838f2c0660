"""
The process journal. Human-readable messages attached to a workflow process.
"""

import abc
from enum import Enum

from loguru import logger
from pydantic import BaseModel


class LogType(Enum):
    """
    Severity of a journal entry.
    """

    ERROR = "error"
    "Something failed and needs attention."
    WARN = "warn"
    "Something unexpected happened, but the step carried on."
    INFO = "info"
    "Informational message."
    DEBUG = "debug"
    "Only of interest when debugging a step."

    def __str__(self):
        return self.value


class Journal(BaseModel, abc.ABC):
    """
    A sink for journal messages. The workflow engine provides the real one;
    the library ships one that only logs.
    """

    @abc.abstractmethod
    def add_message(self, process_id: int, log_type: LogType, message: str, title: str):
        """
        Attach a message to the journal of a process.

        Parameters
        ----------
        process_id : int
            Identifier of the process the message belongs to.
        log_type : LogType
            Severity of the message.
        message : str
            The message itself.
        title : str
            Who wrote the message, usually the step title.
        """
        raise NotImplementedError


class LoggingJournal(Journal):
    """
    Journal that forwards every message to the logger.
    """

    def add_message(self, process_id: int, log_type: LogType, message: str, title: str):
        level = "WARNING" if log_type == LogType.WARN else log_type.name

        logger.log(level, "[process {}] {}: {}", process_id, title, message)
