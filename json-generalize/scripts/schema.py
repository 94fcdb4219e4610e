#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Infer one JSON Schema that accepts every input JSON value."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Iterable, Iterator

from common import configure_logging, load_json, load_jsonl, resolve_array, write_json
from generalize import GeneralizeError, generalize_array

logger = logging.getLogger(__name__)

DRAFT4_URI = "http://json-schema.org/draft-04/schema#"

EXIT_OK = 0
EXIT_UNREADABLE = 2
EXIT_INVALID_JSON = 3
EXIT_REFUSED = 4


def read_documents(path: str, jsonl: bool) -> Iterable[Any]:
    if jsonl:
        return load_jsonl(path)
    source = path if path != "-" else "<stdin>"
    try:
        return [load_json(path)]
    except json.JSONDecodeError as err:
        raise ValueError(f"{source}: invalid JSON at line {err.lineno} column {err.colno}: {err.msg}") from err
    except RecursionError as err:
        raise ValueError(f"{source}: nested too deeply to decode") from err


def iter_instances(
    inputs: list[str],
    jsonl: bool = False,
    each: bool = False,
    array_path: str | None = None,
) -> Iterator[Any]:
    """Yield the values to generalize, in input order."""
    for path in inputs:
        for document in read_documents(path, jsonl):
            if not (each or array_path):
                yield document
                continue
            records = resolve_array(document, array_path)
            if records is not None:
                yield from records
            elif array_path:
                logger.warning("%s: no array at %r, skipped", path, array_path)
            else:
                yield document


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Infer a JSON Schema that generalizes over JSON values.")
    parser.add_argument("inputs", nargs="*", default=["-"], help="Input JSON files, or '-' for stdin.")
    parser.add_argument("--jsonl", action="store_true", help="Treat every non-empty input line as one value.")
    parser.add_argument("--each", action="store_true", help="Generalize over the elements of array documents.")
    parser.add_argument("--array-path", help="Path to the array of values inside each document (implies --each).")
    parser.add_argument("--max-depth", type=int, default=1000, help="Refuse values nested deeper than this.")
    parser.add_argument("--draft4", action="store_true", help="Add the draft-04 $schema keyword.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging on stderr (repeatable).")
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        instances = list(iter_instances(args.inputs, args.jsonl, args.each, args.array_path))
        schema = generalize_array(instances, max_depth=args.max_depth)
    except (OSError, UnicodeDecodeError) as err:
        logger.error("cannot read input: %s", err)
        return EXIT_UNREADABLE
    except GeneralizeError as err:
        logger.error("generalization refused: %s", err)
        return EXIT_REFUSED
    except ValueError as err:
        logger.error("%s", err)
        return EXIT_INVALID_JSON

    logger.info("generalized %d values from %d inputs", len(instances), len(args.inputs))
    if args.draft4:
        schema = {"$schema": DRAFT4_URI, **schema}
    try:
        write_json(schema, compact=args.compact)
    except RecursionError:
        logger.error("generalization refused: schema is nested too deeply to write")
        return EXIT_REFUSED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
