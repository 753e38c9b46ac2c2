from __future__ import annotations

from typing import Any

from smart_scheduler.core.calendar.config import CALENDAR_KEYS
from smart_scheduler.core.errors import RequestLoadError
from smart_scheduler.core.io.read_document import read_document


def load_request(path: str) -> dict[str, Any]:
    """Load a YAML/JSON schedule request file.

    Returns a dict with keys: tasks, plus whichever calendar keys are present.
    Does not coerce types; validation owns shape checking.
    """
    data = read_document(path)
    if not isinstance(data, dict):
        raise RequestLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping/object",
            file=str(path),
        )

    # Extra keys (e.g. a project id from the service payload) are dropped here.
    request: dict[str, Any] = {"tasks": data.get("tasks")}
    request.update({key: data[key] for key in CALENDAR_KEYS if key in data})
    request["__file__"] = str(path)
    return request
