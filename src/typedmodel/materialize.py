"""
Value materialization.

Recursively converts plain input (dicts, lists, scalars) into typed values
according to an assembled schema:

    - absent values take the declared default
    - arrays are converted element by element, order and length preserved
    - nested objects with declared properties are converted recursively
    - model references are constructed (the model validates its own input)
    - strings with a registered format are parsed (e.g. "date" -> date)
    - everything else passes through unchanged

Dispatch uses the "x-kind" discriminant written by PropertyDecl.to_schema.

Any failure surfaces as a MaterializationError whose path names every
property and array index from the top of the input down to the failing value.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from jsonschema.exceptions import best_match

from typedmodel.errors import InvalidValuesError, MaterializationError, PathSegment
from typedmodel.formats import FormatRegistry
from typedmodel.props import MISSING, PropKind


logger = logging.getLogger(__name__)


def materialize_object(
    schema: Mapping[str, Any],
    values: Mapping[str, Any],
    formats: FormatRegistry,
) -> Dict[str, Any]:
    """
    Materialize every writable property declared in `schema`.

    Read-only properties are skipped. Properties that resolve to no value
    (absent and no default) are left out of the result entirely.

    Raises:
        MaterializationError: If any property fails to convert
    """
    result: Dict[str, Any] = {}
    for name, prop_schema in (schema.get("properties") or {}).items():
        # Read-only fields are never written from input.
        if prop_schema.get("readOnly"):
            continue
        value = _at(name, prop_schema, values.get(name, MISSING), formats)
        if value is not MISSING:
            result[name] = value
    return result


def materialize_value(
    schema: Optional[Mapping[str, Any]],
    value: Any,
    formats: FormatRegistry,
) -> Any:
    """
    Materialize a single value against its property schema.

    Returns:
        The typed value, or MISSING if nothing was provided and there is no default

    Raises:
        MaterializationError: If the value (or anything nested in it) fails to convert
    """
    try:
        return _build_value(schema, value, formats)
    except MaterializationError:
        raise
    except Exception as exc:
        raise _wrap(exc) from exc


def _build_value(schema: Optional[Mapping[str, Any]], value: Any, formats: FormatRegistry) -> Any:
    if schema is None:
        return MISSING
    if value is MISSING:
        if "default" not in schema:
            return MISSING
        value = copy.deepcopy(schema["default"])

    kind = schema.get("x-kind")

    if kind == PropKind.ARRAY.value:
        return _build_array(schema, value, formats)

    if kind == PropKind.OBJECT.value:
        if schema.get("properties") is None:
            return dict(value)
        return materialize_object(schema, value, formats)

    if kind == PropKind.MODEL_REF.value:
        return schema["x-model"](value)

    if schema.get("format") and _is_string_like(schema) and isinstance(value, str):
        return formats.parse(schema["format"], value)

    return value


def _build_array(schema: Mapping[str, Any], values: Any, formats: FormatRegistry) -> list:
    items = schema.get("items")
    if not isinstance(items, Mapping):
        return list(values)
    return [_at(index, items, item, formats) for index, item in enumerate(values)]


def _at(segment: PathSegment, schema: Mapping[str, Any], value: Any, formats: FormatRegistry) -> Any:
    """Materialize a child value, prepending its segment to any failure path."""
    try:
        return materialize_value(schema, value, formats)
    except MaterializationError as err:
        err = err.prefixed(segment)
        logger.debug("Failed to materialize %s: %s: %s", err.location, err.kind, err.message)
        raise err from err.__cause__


def _wrap(exc: Exception) -> MaterializationError:
    """Turn an arbitrary exception into a leaf MaterializationError."""
    if isinstance(exc, InvalidValuesError) and exc.violations:
        # Point the path at the offending field inside the nested model.
        best = best_match(exc.violations)
        return MaterializationError(
            type(exc).__name__,
            best.message,
            path=tuple(best.absolute_path),
            violations=exc.violations,
        )
    return MaterializationError(type(exc).__name__, str(exc))


def _is_string_like(schema: Mapping[str, Any]) -> bool:
    declared = schema.get("type")
    if isinstance(declared, (list, tuple)):
        return "string" in declared
    return declared == "string"


__all__ = ["materialize_object", "materialize_value"]
