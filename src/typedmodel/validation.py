"""
Validator adapter.

Runs the external structural validator (jsonschema) against a model's
assembled schema, with direct nested models inlined. Violations are returned
exactly as the validator produced them; this module does not interpret them.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from jsonschema.exceptions import ValidationError

from typedmodel.schema import assemble_schema


logger = logging.getLogger(__name__)


def validate(model: type, values: Any) -> Optional[List[ValidationError]]:
    """
    Validate raw values against a model's schema.

    The validator class and format checker are read from the model
    (`validator_class`, `format_checker`), so a model family can choose them.

    Returns:
        None if the values conform, otherwise the non-empty list of violations
        in validator order. Each has `.message` and `.path`.
    """
    schema = assemble_schema(model, inline_models=True)
    validator = model.validator_class(schema, format_checker=model.format_checker)
    errors = list(validator.iter_errors(values))

    if not errors:
        return None

    logger.debug("%s: %d schema violation(s)", model.__name__, len(errors))
    return errors


__all__ = ["validate"]
