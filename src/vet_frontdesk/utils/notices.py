"""
Auto-expiring notices shown as a banner after user actions.

A notice carries the text of a success or a failure and disappears after a
short time or when the user dismisses it. Rendering is left to the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from ..exceptions import user_message
from .config import DEFAULT_NOTICE_SECONDS
from .datetime_utils import get_current_utc

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notice:
    """A single banner message."""

    kind: NoticeKind
    message: str
    created_at: datetime = field(default_factory=get_current_utc)
    ttl_seconds: float = DEFAULT_NOTICE_SECONDS

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_seconds)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or get_current_utc()) >= self.expires_at

    @classmethod
    def success(cls, message: str, **kwargs) -> "Notice":
        return cls(NoticeKind.SUCCESS, message, **kwargs)

    @classmethod
    def error(cls, message: str, **kwargs) -> "Notice":
        return cls(NoticeKind.ERROR, message, **kwargs)

    @classmethod
    def from_exception(cls, exception: BaseException, **kwargs) -> "Notice":
        """Build an error notice with the text the user should see for ``exception``."""
        return cls(NoticeKind.ERROR, user_message(exception), **kwargs)


class NoticeBoard:
    """
    Holds the notice currently on screen.

    Posting replaces whatever was shown before; reading after the notice
    expired clears it.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_NOTICE_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._current: Optional[Notice] = None

    def post(self, notice: Notice) -> Notice:
        self._current = notice
        if notice.kind is NoticeKind.ERROR:
            logger.info(f"Error notice posted: {notice.message}")
        return notice

    def success(self, message: str, now: Optional[datetime] = None) -> Notice:
        return self.post(
            Notice.success(
                message,
                created_at=now or get_current_utc(),
                ttl_seconds=self.ttl_seconds,
            )
        )

    def error(self, message: str, now: Optional[datetime] = None) -> Notice:
        return self.post(
            Notice.error(
                message,
                created_at=now or get_current_utc(),
                ttl_seconds=self.ttl_seconds,
            )
        )

    def report(self, exception: BaseException, now: Optional[datetime] = None) -> Notice:
        """Post the user-facing text of a failed action."""
        return self.post(
            Notice.from_exception(
                exception,
                created_at=now or get_current_utc(),
                ttl_seconds=self.ttl_seconds,
            )
        )

    def current(self, now: Optional[datetime] = None) -> Optional[Notice]:
        """The visible notice, or None once it expired or was dismissed."""
        if self._current is not None and self._current.is_expired(now):
            self._current = None
        return self._current

    def dismiss(self) -> None:
        self._current = None
