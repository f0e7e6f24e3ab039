"""
Reshape JSON output: field selection first, then an optional jq filter.

Field selection projects result records onto a set of keys. A response
envelope with a ``results`` array is flattened to the filtered array, so
``--fields title,url`` yields a flat list of records.
"""

from collections.abc import Iterable, Iterator
from typing import Any

import jq

from api.errors import FilterEvaluationError

RESULTS_KEY = "results"


def parse_fields(value: str | None) -> set[str]:
    """Split a comma-separated field list, dropping blanks."""
    if not value:
        return set()
    return {name.strip() for name in value.split(",") if name.strip()}


def _project(record: dict[str, Any], fields: set[str]) -> dict[str, Any]:
    return {key: value for key, value in record.items() if key in fields}


def _project_items(items: list[Any], fields: set[str]) -> list[Any]:
    return [_project(item, fields) if isinstance(item, dict) else item for item in items]


def filter_fields(document: Any, fields: Iterable[str] | None) -> Any:
    """
    Keep only the requested keys of each record.

    - empty field list: document returned unchanged
    - array: each object element is projected
    - object with a ``results`` array: the projected array is returned
    - any other object: its top-level keys are projected
    """
    fields = set(fields or ())
    if not fields:
        return document

    if isinstance(document, list):
        return _project_items(document, fields)

    if isinstance(document, dict):
        nested = document.get(RESULTS_KEY)
        if isinstance(nested, list):
            return _project_items(nested, fields)
        return _project(document, fields)

    return document


def compile_filter(expression: str):
    try:
        return jq.compile(expression)
    except ValueError as e:
        raise FilterEvaluationError(f"invalid jq expression: {e}") from e


def run_filter(document: Any, expression: str) -> Iterator[Any]:
    """
    Evaluate a jq expression, yielding each output value as it is produced.

    A runtime error raises FilterEvaluationError at that point; values
    already yielded stay delivered and nothing further is produced.
    """
    program = compile_filter(expression)
    outputs = iter(program.input_value(document))
    while True:
        try:
            value = next(outputs)
        except StopIteration:
            return
        except ValueError as e:
            raise FilterEvaluationError(f"jq error: {e}") from e
        yield value


def reshape(
    document: Any, fields: Iterable[str] | None = None, expression: str | None = None
) -> Iterator[Any]:
    """
    Apply field selection and then the jq filter.

    Yields:
        Each output value as it is produced; without an expression, exactly
        the field-filtered document.
    """
    filtered = filter_fields(document, fields)
    if not expression:
        yield filtered
        return
    yield from run_filter(filtered, expression)
