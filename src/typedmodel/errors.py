"""
Error kinds raised by typedmodel.

    - DuplicateFormatError: a format name registered twice
    - FormatRegistryFrozenError: registration after the registry was frozen
    - InvalidValuesError: construction input failed structural validation
    - MaterializationError: converting one value failed, with a path trace
    - ModelDefinitionError: a model class declares an unusable property map

ARCHITECTURAL RULE:
    Errors are immutable once raised. Path traces are rebuilt by creating
    a new MaterializationError at each level, never by mutating one in flight.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union


PathSegment = Union[str, int]


def format_path(path: Iterable[PathSegment], root: Optional[str] = None) -> str:
    """
    Render path segments as a dotted/bracketed location.

    Example:
        format_path(["items", 2, "price"], root="Order") -> "Order.items[2].price"
    """
    out = root or ""
    for segment in path:
        if isinstance(segment, int):
            out += f"[{segment}]"
        elif out:
            out += f".{segment}"
        else:
            out = str(segment)
    return out


class TypedModelError(Exception):
    """Base class for all typedmodel errors."""
    pass


class DuplicateFormatError(TypedModelError, ValueError):
    """Raised when a format name is registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Format already registered: {name}")


class FormatRegistryFrozenError(TypedModelError, RuntimeError):
    """Raised when registering into a registry that was frozen."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot register format {name!r}: registry is frozen")


class ModelDefinitionError(TypedModelError, TypeError):
    """Raised when a model class declares an invalid property map."""
    pass


def _violation_summary(violation: Any) -> str:
    path = format_path(getattr(violation, "absolute_path", ()))
    message = getattr(violation, "message", str(violation))
    return f"{path}: {message}" if path else message


class InvalidValuesError(TypedModelError, ValueError):
    """
    Raised when construction input fails structural validation.

    Properties:
        values: the raw input that was rejected
        violations: the validator's own error objects, in validator order
    """

    def __init__(self, values: Any, violations: Sequence[Any]):
        self.values = values
        self.violations = list(violations)
        details = json.dumps([_violation_summary(v) for v in self.violations], indent=2)
        super().__init__(
            f"Invalid values: {json.dumps(values, indent=2, default=str)}: {details}"
        )


class MaterializationError(TypedModelError):
    """
    Raised when a single value could not be converted.

    Properties:
        kind:
            Name of the underlying error type (e.g. "InvalidValuesError")
        message:
            Underlying error message
        path:
            Segments from the root model to the failing value.
            Strings are property names, ints are array indices.
        root:
            Name of the model whose construction failed at the top
        violations:
            Validator errors when the cause was a nested InvalidValuesError
    """

    def __init__(
        self,
        kind: str,
        message: str,
        path: Sequence[PathSegment] = (),
        root: Optional[str] = None,
        violations: Sequence[Any] = (),
    ):
        self.kind = kind
        self.message = message
        self.path: Tuple[PathSegment, ...] = tuple(path)
        self.root = root
        self.violations: List[Any] = list(violations)
        super().__init__(f"{self.location or '<root>'}: {kind}: {message}")

    @property
    def location(self) -> str:
        return format_path(self.path, root=self.root)

    def prefixed(self, *segments: PathSegment) -> MaterializationError:
        """Return a copy of this error with segments prepended to its path."""
        err = MaterializationError(
            self.kind, self.message, segments + self.path, self.root, self.violations
        )
        err.__cause__ = self.__cause__
        return err

    def rooted(self, root: str) -> MaterializationError:
        """Return a copy of this error attributed to the given root model."""
        err = MaterializationError(self.kind, self.message, self.path, root, self.violations)
        err.__cause__ = self.__cause__
        return err


__all__ = [
    "PathSegment",
    "format_path",
    "TypedModelError",
    "DuplicateFormatError",
    "FormatRegistryFrozenError",
    "ModelDefinitionError",
    "InvalidValuesError",
    "MaterializationError",
]
