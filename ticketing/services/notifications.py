"""Notification port used by the wizard to report progress and failures."""

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Notice:
    id: str
    level: str
    message: str


class NotificationPort(ABC):
    @abstractmethod
    def loading(self, message: str) -> str:
        """Show a loading notice and return its id."""
        ...

    @abstractmethod
    def dismiss(self, notice_id: str) -> None:
        ...

    @abstractmethod
    def success(self, message: str) -> None:
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        ...


class CollectingNotifier(NotificationPort):
    """Keeps notices in memory so a handler can return them in the response."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._notices: list[Notice] = []

    def _add(self, level: str, message: str) -> str:
        notice = Notice(id=str(next(self._ids)), level=level, message=message)
        self._notices.append(notice)
        return notice.id

    def loading(self, message: str) -> str:
        return self._add("loading", message)

    def dismiss(self, notice_id: str) -> None:
        self._notices = [n for n in self._notices if n.id != notice_id]

    def success(self, message: str) -> None:
        self._add("success", message)

    def warning(self, message: str) -> None:
        self._add("warning", message)

    def error(self, message: str) -> None:
        self._add("error", message)

    @property
    def notices(self) -> list[Notice]:
        return list(self._notices)

    def as_list(self) -> list[dict[str, str]]:
        return [{"level": n.level, "message": n.message} for n in self._notices]
