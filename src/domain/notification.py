"""Notification Domain Entity

User-facing messages emitted by the quote line editor.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Notification severity"""
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """A single user-facing message"""

    severity: Severity
    title: str
    message: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls(severity=Severity.SUCCESS, title="Success", message=message)

    @classmethod
    def info(cls, message: str) -> "Notification":
        return cls(severity=Severity.INFO, title="Info", message=message)

    @classmethod
    def warning(cls, message: str) -> "Notification":
        return cls(severity=Severity.WARNING, title="Warning", message=message)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls(severity=Severity.ERROR, title="Error", message=message)
