"""
Property declarations.

Users declare properties as plain JSON-Schema dicts, where `type` may also
be a TypedModel subclass:

    props = {
        "placed": {"type": "string", "format": "date"},
        "items": {"type": "array", "items": {"type": Item}},
        "parent": {"$ref": "#"},
    }

Each dict is normalized once, when the model class is defined, into an
immutable PropertyDecl carrying an explicit kind. Nothing downstream has
to inspect `type` values at runtime to find out what a property is.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from typedmodel.errors import ModelDefinitionError


PRIMITIVE_TYPES = frozenset({"string", "number", "integer", "boolean", "null"})

# Keys rendered by PropertyDecl itself. Everything else is kept in `keywords`.
_STRUCTURAL_KEYS = frozenset({"type", "format", "default", "readOnly", "items", "properties", "$ref"})

SELF_REF = "#"


class _Missing:
    """Marker for an absent value. Distinct from None, which is a real value."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo) -> _Missing:
        return self


MISSING: Any = _Missing()


class PropKind(Enum):
    """Discriminant of a property declaration."""

    PRIMITIVE = "primitive"
    OBJECT = "object"
    ARRAY = "array"
    MODEL_REF = "modelRef"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class PropertyDecl:
    """
    One normalized property declaration.

    Properties:
        kind: what the property holds (see PropKind)
        type: declared JSON-Schema type (name or list of names), None for models
        model: target model class when kind is MODEL_REF, None for {"$ref": "#"}
        format: string format name, applies to string-like types
        default: value used when the input omits the property (or MISSING)
        read_only: excluded from construction, kept in serialization
        items: declaration of array elements
        properties: declarations of nested object properties
        keywords: remaining JSON-Schema keywords, passed to the validator as-is
        ref: `$ref` alias; "#" is a self reference, anything else is kept for the validator
    """

    kind: PropKind
    type: Any = None
    model: Optional[type] = None
    format: Optional[str] = None
    default: Any = MISSING
    read_only: bool = False
    items: Optional[PropertyDecl] = None
    properties: Optional[Dict[str, PropertyDecl]] = None
    keywords: Dict[str, Any] = field(default_factory=dict)
    ref: Optional[str] = None

    @property
    def is_string_like(self) -> bool:
        if isinstance(self.type, (list, tuple)):
            return "string" in self.type
        return self.type == "string"

    @property
    def is_self_ref(self) -> bool:
        return self.kind is PropKind.MODEL_REF and self.model is None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str = "<property>") -> PropertyDecl:
        """
        Normalize a declaration dict.

        Args:
            data: JSON-Schema style declaration
            name: property name, used in error messages

        Raises:
            ModelDefinitionError: If the declaration is not a mapping
        """
        if not isinstance(data, Mapping):
            raise ModelDefinitionError(
                f"Declaration of {name!r} must be a mapping, got {type(data).__name__}"
            )

        declared_type = data.get("type")
        ref = data.get("$ref")
        items = None
        properties = None
        model = None

        if _is_model_class(declared_type):
            kind = PropKind.MODEL_REF
            model = declared_type
            declared_type = None
        elif declared_type is None and ref == SELF_REF:
            # Resolved against the model being assembled, so subclasses refer to themselves.
            kind = PropKind.MODEL_REF
        elif declared_type == "array":
            kind = PropKind.ARRAY
            if isinstance(data.get("items"), Mapping):
                items = cls.from_dict(data["items"], f"{name}[]")
        elif declared_type == "object":
            kind = PropKind.OBJECT
            if data.get("properties") is not None:
                properties = normalize_props(data["properties"])
        elif _is_primitive(declared_type):
            kind = PropKind.PRIMITIVE
        else:
            kind = PropKind.UNRESOLVED

        keywords = {k: v for k, v in data.items() if k not in _STRUCTURAL_KEYS}
        # Tuple-style items are not normalized; the validator gets them untouched.
        if kind is PropKind.ARRAY and items is None and "items" in data:
            keywords["items"] = data["items"]

        return cls(
            kind=kind,
            type=declared_type,
            model=model,
            format=data.get("format"),
            default=data.get("default", MISSING),
            read_only=bool(data.get("readOnly", False)),
            items=items,
            properties=properties,
            keywords=keywords,
            ref=ref,
        )

    def to_schema(self, self_model: Optional[type] = None) -> Dict[str, Any]:
        """
        Render this declaration as a JSON-Schema dict.

        Args:
            self_model: model class that {"$ref": "#"} resolves to

        Model references are rendered as opaque markers:
            {"type": "object", "x-kind": "modelRef", "x-model": <class>}
        Every rendered schema carries its kind under "x-kind". Validators
        ignore "x-" keywords.
        """
        schema: Dict[str, Any] = dict(self.keywords)

        if self.kind is PropKind.MODEL_REF:
            schema["type"] = "object"
            schema["x-model"] = self.model or self_model
        elif self.type is not None:
            schema["type"] = self.type

        if self.ref is not None and not self.is_self_ref:
            schema["$ref"] = self.ref
        if self.format is not None:
            schema["format"] = self.format
        if self.default is not MISSING:
            schema["default"] = self.default
        if self.read_only:
            schema["readOnly"] = True
        if self.items is not None:
            schema["items"] = self.items.to_schema(self_model)
        if self.properties is not None:
            schema["properties"] = {k: v.to_schema(self_model) for k, v in self.properties.items()}

        schema["x-kind"] = self.kind.value
        return schema


def normalize_props(props: Any) -> Dict[str, PropertyDecl]:
    """
    Normalize a whole property map, keeping declaration order.

    Raises:
        ModelDefinitionError: If `props` or one of its entries is not a mapping
    """
    if not isinstance(props, Mapping):
        raise ModelDefinitionError(
            f"Property map must be a mapping, got {type(props).__name__}"
        )
    return {name: PropertyDecl.from_dict(data, name) for name, data in props.items()}


def _is_primitive(declared_type: Any) -> bool:
    if isinstance(declared_type, (list, tuple)):
        return bool(declared_type) and all(_is_primitive(t) for t in declared_type)
    return isinstance(declared_type, str) and declared_type in PRIMITIVE_TYPES


def _is_model_class(obj: Any) -> bool:
    from typedmodel.model import is_model_class

    return is_model_class(obj)


__all__ = [
    "MISSING",
    "PRIMITIVE_TYPES",
    "SELF_REF",
    "PropKind",
    "PropertyDecl",
    "normalize_props",
]
