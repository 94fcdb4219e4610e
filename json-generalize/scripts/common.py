#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Shared helpers for json-generalize scripts."""

from __future__ import annotations

import json
import logging
import numbers
import re
import sys
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator

logger = logging.getLogger(__name__)

PATH_TOKEN_RE = re.compile(r"([^.\[\]]+)|\[(\*|-?\d+)\]")

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# JSON Schema tags the generalizer may emit. "integer" is never produced.
PRIMITIVE_TYPES = ("array", "boolean", "number", "null", "object", "string")

UNDEFINED = "undefined"


class _Missing:
    """Placeholder for a value that is absent, as opposed to null."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self


MISSING = _Missing()


def primitive_type(value: Any) -> str:
    """Map a python value to a JSON Schema primitive tag, or 'undefined' when absent.

    Numbers are always 'number'. Values with no JSON counterpart map to their
    python type name so the caller can decide what to do with them.
    """
    if value is MISSING:
        return UNDEFINED
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return "array"
    # bool first: it is an int subclass.
    if isinstance(value, bool):
        return "boolean"
    # Real plus Decimal: complex has no JSON form.
    if isinstance(value, (numbers.Real, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def configure_logging(verbosity: int = 0) -> None:
    """Send log records to stderr; 0 is WARNING, 1 is INFO, 2+ is DEBUG."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def read_text(path: str | None) -> str:
    """Read a file path, or stdin when path is '-' or None."""
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def load_json(path: str | None) -> Any:
    """Load one JSON document from a file path or stdin."""
    return json.loads(read_text(path))


def load_jsonl(path: str | None) -> Iterator[Any]:
    """Yield one value per non-empty line. Malformed lines raise ValueError naming the line."""
    text = read_text(path)
    source = path if path and path != "-" else "<stdin>"
    for line_no, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        try:
            value = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{source}: invalid JSON on line {line_no}: {exc.msg}") from exc
        except RecursionError as exc:
            raise ValueError(f"{source}: line {line_no} is nested too deeply to decode") from exc
        yield value


def write_json(data: Any, compact: bool = False) -> None:
    """Write JSON to stdout. Key order is kept as inserted; nothing is written if encoding fails."""
    if compact:
        text = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    else:
        text = json.dumps(data, ensure_ascii=False, indent=2)
    sys.stdout.write(text + "\n")


def parse_path(path: str) -> list[str | int]:
    """Split 'a.b[0].c[*]' into ['a', 'b', 0, 'c', '*']."""
    tokens: list[str | int] = []
    for match in PATH_TOKEN_RE.finditer(path or ""):
        key, index = match.group(1), match.group(2)
        if key is not None:
            tokens.append(key)
        elif index == "*":
            tokens.append("*")
        else:
            tokens.append(int(index))
    return tokens


def extract_values(data: Any, path: str) -> list[Any]:
    """Every value reached by following path from data; wildcards fan out."""
    values = [data]
    for token in parse_path(path):
        reached: list[Any] = []
        for value in values:
            if token == "*":
                if isinstance(value, list):
                    reached.extend(value)
                elif isinstance(value, dict):
                    reached.extend(value.values())
            elif isinstance(token, int):
                if isinstance(value, list) and -len(value) <= token < len(value):
                    reached.append(value[token])
            elif isinstance(value, dict) and token in value:
                reached.append(value[token])
        values = reached
    return values


def resolve_array(data: Any, array_path: str | None) -> list[Any] | None:
    """First array at array_path (or data itself without a path); None when there is none."""
    candidates = extract_values(data, array_path) if array_path else [data]
    for value in candidates:
        if isinstance(value, list):
            return value
    return None
