from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from smart_scheduler.core.errors import RequestLoadError


YAML_SUFFIXES = {".yaml", ".yml"}


class _DocumentLoader(yaml.SafeLoader):
    """SafeLoader that leaves unquoted dates as strings, so dueDate/startDate go through strict parsing."""


_DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def read_document(path: str | Path) -> Any:
    """Parse a .yaml/.yml/.json file into plain Python data.

    Raises RequestLoadError (E_FILE_NOT_FOUND, E_UNSUPPORTED_FORMAT,
    E_YAML_PARSE, E_JSON_PARSE). Shape checks are left to the caller.
    """
    p = Path(path)
    if not p.exists():
        raise RequestLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))

    suffix = p.suffix.lower()
    if suffix not in YAML_SUFFIXES and suffix != ".json":
        raise RequestLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message="supported formats are .yaml/.yml and .json",
            file=str(p),
        )

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:  # pragma: no cover
        raise RequestLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    if suffix in YAML_SUFFIXES:
        try:
            return yaml.load(raw_text, Loader=_DocumentLoader)
        except yaml.YAMLError as e:
            raise RequestLoadError(code="E_YAML_PARSE", message=str(e), file=str(p)) from e
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise RequestLoadError(code="E_JSON_PARSE", message=str(e), file=str(p)) from e
