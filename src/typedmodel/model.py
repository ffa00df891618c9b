"""
Typed model base class.

Subclasses declare a property map and, optionally, a schema overlay:

    class Item(TypedModel):
        props = {
            "sku": {"type": "string"},
            "price": {"type": "number"},
        }
        schema = {"required": ["sku", "price"]}

    class DiscountedItem(Item):
        props = {
            "discount": {"type": "number", "default": 0},
        }

Construction validates the input against the assembled schema and then
materializes it into typed fields:

    item = DiscountedItem({"sku": "A-1", "price": 9.5})
    item.discount        -> 0
    item.as_object()     -> {"sku": "A-1", "price": 9.5, "discount": 0}

LIFECYCLE:
    input -> validated -> materialized instance
    Invalid input raises InvalidValuesError and no instance exists.
    A failing nested value raises MaterializationError with its path.

CONFIGURATION (class attributes, inherited by a model family):
    formats: FormatRegistry used for string formats
    validator_class: jsonschema validator class
    format_checker: jsonschema FormatChecker, or None to skip format assertions
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from jsonschema import Draft202012Validator

from typedmodel.errors import InvalidValuesError, MaterializationError, ModelDefinitionError
from typedmodel.formats import DEFAULT_FORMATS, FormatRegistry
from typedmodel.materialize import materialize_object
from typedmodel.props import PropertyDecl, normalize_props
from typedmodel.schema import assemble_schema, effective_props
from typedmodel import serialization, validation


class TypedModel:
    """Base class for schema-declared models. Not constructible itself."""

    props: Dict[str, Any] = {}
    schema: Optional[Dict[str, Any]] = None

    formats: FormatRegistry = DEFAULT_FORMATS
    validator_class = Draft202012Validator
    format_checker = Draft202012Validator.FORMAT_CHECKER

    __parent_model__: Optional[type] = None
    __declared__: Dict[str, PropertyDecl] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        parents = [base for base in cls.__bases__ if is_model_class(base)]
        if len(parents) > 1:
            raise ModelDefinitionError(
                f"{cls.__name__} extends more than one model: "
                f"{', '.join(p.__name__ for p in parents)}"
            )

        overlay = getattr(cls, "schema", None)
        if overlay is not None and not isinstance(overlay, Mapping):
            raise ModelDefinitionError(f"{cls.__name__}.schema must be a mapping")

        declared = normalize_props(cls.__dict__.get("props", {}))
        for name in declared:
            if hasattr(TypedModel, name):
                raise ModelDefinitionError(
                    f"{cls.__name__}: property {name!r} clashes with a TypedModel attribute"
                )

        cls.__parent_model__ = parents[0] if parents else None
        cls.__declared__ = declared

    def __init__(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        cls = type(self)
        if cls is TypedModel:
            raise TypeError("TypedModel cannot be instantiated directly")

        if kwargs:
            values = {**(values or {}), **kwargs}
        elif values is None:
            values = {}

        errors = cls.validate(values)
        if errors:
            raise InvalidValuesError(values, errors)

        # Nested models stay markers: they are constructed, and so validated, on their own.
        schema = cls.get_schema(inline_models=False)
        try:
            fields = materialize_object(schema, values, cls.formats)
        except MaterializationError as err:
            raise err.rooted(cls.__name__) from err.__cause__

        self.__dict__.update(fields)

    def __getattr__(self, name: str) -> Any:
        # Declared properties that were not provided read as None.
        if name in effective_props(type(self)):
            return None
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    @classmethod
    def get_schema(cls, inline_models: bool = True) -> Dict[str, Any]:
        """Assembled JSON-Schema of this model. Recomputed on every call."""
        return assemble_schema(cls, inline_models=inline_models)

    @classmethod
    def get_props(cls) -> Dict[str, PropertyDecl]:
        """Effective property declarations, including inherited ones."""
        return effective_props(cls)

    @classmethod
    def validate(cls, values: Any):
        """
        Validate raw values without constructing an instance.

        Returns:
            None if valid, otherwise the list of jsonschema violations
        """
        return validation.validate(cls, values)

    @classmethod
    def from_json(cls, text: str) -> TypedModel:
        return cls(serialization.from_json(text))

    @classmethod
    def from_yaml(cls, text: str) -> TypedModel:
        return cls(serialization.from_yaml(text))

    def as_object(self) -> Dict[str, Any]:
        """Render this instance back to plain data."""
        cls = type(self)
        return serialization.render_object(effective_props(cls), self, cls.formats, self_model=cls)

    def as_json(self, indent: Optional[int] = None) -> str:
        return serialization.to_json(self.as_object(), indent=indent)

    def as_yaml(self) -> str:
        return serialization.to_yaml(self.as_object())

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.as_object() == other.as_object()

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


def is_model(obj: Any) -> bool:
    """True for TypedModel instances."""
    return isinstance(obj, TypedModel)


def is_model_class(obj: Any) -> bool:
    """True for TypedModel subclasses (the abstract base itself excluded)."""
    return isinstance(obj, type) and issubclass(obj, TypedModel) and obj is not TypedModel


__all__ = ["TypedModel", "is_model", "is_model_class"]
