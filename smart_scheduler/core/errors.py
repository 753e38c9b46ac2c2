from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ScheduleError(Exception):
    """Base error envelope. Every failure of the scheduling core is one of these."""

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<request>"
        return f"{loc}: {self.code}: {self.message}"


class RequestLoadError(ScheduleError):
    pass


class InputShapeError(ScheduleError):
    pass


class TaskValidationError(ScheduleError):
    pass


class DependencyError(ScheduleError):
    pass


class CycleError(ScheduleError):
    pass
