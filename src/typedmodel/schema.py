"""
Schema assembly.

Turns a model class into the JSON-Schema dict used both for validation and
for materialization:

    {
        "type": "object",
        "title": "Order",
        "properties": {...effective property map...},
        "additionalProperties": False,
        ...schema overlay declared on the model...
    }

The effective property map merges every ancestor's own declarations,
oldest ancestor first, then the model's own. A redeclared name replaces the
ancestor's declaration entirely.

Schemas are assembled on every call. Nothing is cached.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from typedmodel.props import PropKind, PropertyDecl


def parent_model(model: type) -> Optional[type]:
    """Return the model class `model` extends, or None for a root model."""
    return getattr(model, "__parent_model__", None)


def ancestry(model: type) -> List[type]:
    """Return the model chain from the oldest ancestor down to `model`."""
    chain = []
    cls: Optional[type] = model
    while cls is not None:
        chain.append(cls)
        cls = parent_model(cls)
    chain.reverse()
    return chain


def effective_props(model: type) -> Dict[str, PropertyDecl]:
    """Merge property declarations across the inheritance chain."""
    props: Dict[str, PropertyDecl] = {}
    for cls in ancestry(model):
        props.update(cls.__dict__.get("__declared__", {}))
    return props


def assemble_schema(model: type, inline_models: bool = False) -> Dict[str, Any]:
    """
    Assemble the structural schema of a model class.

    Args:
        model: TypedModel subclass
        inline_models:
            If True, properties typed with another model are replaced by that
            model's own schema (assembled with inlining off, so only direct
            nested models are expanded). If False they stay opaque markers.

    Returns:
        JSON-Schema dict. A fresh object on every call.
    """
    properties: Dict[str, Any] = {}
    for name, decl in effective_props(model).items():
        if inline_models and decl.kind is PropKind.MODEL_REF:
            nested = assemble_schema(decl.model or model, inline_models=False)
            nested.update(decl.to_schema(self_model=model))
            properties[name] = nested
        else:
            properties[name] = decl.to_schema(self_model=model)

    schema: Dict[str, Any] = {
        "type": "object",
        "title": model.__name__,
        "properties": properties,
        "additionalProperties": False,
    }
    # The overlay wins on key collisions.
    schema.update(copy.deepcopy(dict(getattr(model, "schema", None) or {})))
    return schema


__all__ = ["parent_model", "ancestry", "effective_props", "assemble_schema"]
