#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Generalize JSON values into a JSON Schema that accepts all of them.

A schema is a plain dict using three draft-4 keywords:

- ``type``: absent (matches anything), one tag, or a list of tags in the order
  they were first seen.
- ``properties``: present once an object was seen; one sub-schema per key.
- ``items``: present once an array was seen; a single sub-schema shared by every
  element of every array seen at that position.

``union`` widens a schema in place and returns it. Callers that need the
previous schema should ``copy.deepcopy`` it first.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any, Iterable

from common import PRIMITIVE_TYPES, UNDEFINED, primitive_type

logger = logging.getLogger(__name__)

Schema = dict


class GeneralizeError(ValueError):
    """A value could not be folded into a schema."""


class DepthLimitError(GeneralizeError):
    def __init__(self, depth: int, limit: int) -> None:
        super().__init__(f"value nested {depth} levels deep exceeds max depth {limit}")
        self.depth = depth
        self.limit = limit


class UnsupportedValueError(GeneralizeError, TypeError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"cannot generalize a value of type {tag!r}; only JSON values are supported")
        self.tag = tag


def schema_types(schema: Schema) -> list[str]:
    """Tags of a schema node as a list; empty for an empty schema."""
    schema_type = schema.get("type")
    if schema_type is None:
        return []
    if isinstance(schema_type, list):
        return list(schema_type)
    return [schema_type]


def type_matches(tag: str, schema_type: str | list[str] | None) -> bool:
    if schema_type is None:
        return False
    if isinstance(schema_type, list):
        return tag in schema_type
    return tag == schema_type


def add_type(tag: str, schema_type: str | list[str] | None) -> str | list[str]:
    """Return schema_type widened by tag. Assumes tag is not already present."""
    if not schema_type:
        return tag
    if isinstance(schema_type, list):
        return schema_type + [tag]
    return [schema_type, tag]


def _widen(node: Schema, tag: str) -> None:
    current = node.get("type")
    if type_matches(tag, current):
        return
    node["type"] = add_type(tag, current)
    logger.debug("widened %r with %s", current, tag)


def _check(instance: Any, max_depth: int | None) -> None:
    """Raise if instance cannot be folded; nothing is mutated."""
    stack: list[tuple[Any, int]] = [(instance, 0)]
    while stack:
        value, depth = stack.pop()
        tag = primitive_type(value)
        if tag == UNDEFINED:
            continue
        if tag not in PRIMITIVE_TYPES:
            raise UnsupportedValueError(tag)
        if max_depth is not None and depth > max_depth:
            raise DepthLimitError(depth, max_depth)
        if tag == "object":
            stack.extend((inner, depth + 1) for inner in value.values())
        elif tag == "array":
            stack.extend((element, depth + 1) for element in value)


def union(schema: Schema, instance: Any, max_depth: int | None = None) -> Schema:
    """Widen schema so it also matches instance, and return it.

    Absent values (``MISSING``) leave the schema untouched. The instance is
    checked in full before any node changes, so a refused instance leaves the
    schema as it was. Values are visited depth first with an explicit stack,
    so nesting depth is limited only by ``max_depth``; passing a limit also
    turns cyclic input into a ``DepthLimitError`` instead of an endless loop.
    """
    if not isinstance(schema, MutableMapping):
        raise GeneralizeError(f"schema must be a dict, got {type(schema).__name__}")
    _check(instance, max_depth)

    stack: list[tuple[Schema, Any]] = [(schema, instance)]
    while stack:
        node, value = stack.pop()
        tag = primitive_type(value)
        if tag == UNDEFINED:
            continue

        _widen(node, tag)

        if tag == "object":
            properties = node.setdefault("properties", {})
            children = []
            for key, inner in value.items():
                child = properties.get(key)
                if child is None:
                    child = properties[key] = {}
                children.append((child, inner))
            # Reversed so the first key is popped, and fully merged, first.
            stack.extend(reversed(children))
        elif tag == "array":
            items = node.setdefault("items", {})
            stack.extend((items, element) for element in reversed(value))

    return schema


def generalize_array(instances: Iterable[Any], max_depth: int | None = None) -> Schema:
    """Fold every instance, in order, into a fresh empty schema."""
    schema: Schema = {}
    count = 0
    for instance in instances:
        union(schema, instance, max_depth=max_depth)
        count += 1
    logger.debug("generalized %d instances into %s", count, schema_types(schema) or "empty schema")
    return schema


def generalize_from(*instances: Any, max_depth: int | None = None) -> Schema:
    return generalize_array(instances, max_depth=max_depth)
