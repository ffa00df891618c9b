"""
Serialization helpers for typed model instances.

Renders materialized values back to plain data (the reverse of
typedmodel.materialize) and encodes plain data as JSON/YAML text.
Field order follows the effective property map.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

import yaml

from typedmodel.formats import FormatRegistry
from typedmodel.props import MISSING, PropKind, PropertyDecl


def render_object(
    props: Mapping[str, PropertyDecl],
    source: Any,
    formats: FormatRegistry,
    self_model: Optional[type] = None,
) -> Dict[str, Any]:
    """
    Render declared properties of an instance (or plain mapping).

    Properties without a value are omitted. Read-only properties are
    rendered when set. `self_model` is the target of {"$ref": "#"}.
    """
    result: Dict[str, Any] = {}
    for name, decl in props.items():
        value = _lookup(source, name)
        if value is MISSING:
            continue
        result[name] = render_value(decl, value, formats, self_model)
    return result


def render_value(
    decl: Optional[PropertyDecl],
    value: Any,
    formats: FormatRegistry,
    self_model: Optional[type] = None,
) -> Any:
    if decl is None or value is None:
        return value

    if decl.kind is PropKind.MODEL_REF:
        target = decl.model or self_model
        return value.as_object() if target is not None and isinstance(value, target) else value

    if decl.kind is PropKind.ARRAY:
        return [render_value(decl.items, item, formats, self_model) for item in value]

    if decl.kind is PropKind.OBJECT and decl.properties is not None and isinstance(value, Mapping):
        return render_object(decl.properties, value, formats, self_model)

    if decl.is_string_like and decl.format and not isinstance(value, str):
        return formats.render(decl.format, value)

    return value


def _lookup(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name, MISSING)
    return vars(source).get(name, MISSING)


def to_json(data: Any, indent: Optional[int] = None) -> str:
    return json.dumps(data, indent=indent)


def from_json(text: str) -> Any:
    return json.loads(text)


def to_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False)


def from_yaml(text: str) -> Any:
    return yaml.safe_load(text)


__all__ = [
    "render_object",
    "render_value",
    "to_json",
    "from_json",
    "to_yaml",
    "from_yaml",
]
