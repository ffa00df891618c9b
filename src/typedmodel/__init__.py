"""
Typed Model Package

Typed objects on top of declarative JSON-Schema property maps.

A model class declares a property map. Instances are built from plain data:
    1. the input is validated against the assembled schema (jsonschema)
    2. the input is materialized into typed values
       (nested models, arrays, formatted strings such as dates)
    3. as_object() renders the instance back to plain data

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Validation keywords (delegated to jsonschema)
    - Persistence or querying
    - Network transport

Custom string encodings plug in through FormatRegistry.
"""

from typedmodel.errors import (
    DuplicateFormatError,
    FormatRegistryFrozenError,
    InvalidValuesError,
    MaterializationError,
    ModelDefinitionError,
    TypedModelError,
)
from typedmodel.formats import DEFAULT_FORMATS, FormatEntry, FormatRegistry
from typedmodel.model import TypedModel, is_model, is_model_class
from typedmodel.props import MISSING, PropKind, PropertyDecl
from typedmodel.schema import assemble_schema, effective_props

__version__ = "0.1.0"

__all__ = [
    "TypedModel",
    "is_model",
    "is_model_class",
    "FormatEntry",
    "FormatRegistry",
    "DEFAULT_FORMATS",
    "PropKind",
    "PropertyDecl",
    "MISSING",
    "assemble_schema",
    "effective_props",
    "TypedModelError",
    "DuplicateFormatError",
    "FormatRegistryFrozenError",
    "InvalidValuesError",
    "MaterializationError",
    "ModelDefinitionError",
]
