"""Helpers for reading request payloads into pydantic schemas."""

from typing import Type, TypeVar

from flask import request
from pydantic import BaseModel

from ..core.error_handlers import ValidationError

SchemaT = TypeVar('SchemaT', bound=BaseModel)


def parse_json_body(schema: Type[SchemaT]) -> SchemaT:
    """Validate the JSON body against ``schema``.

    Malformed or non-object bodies raise ``ValidationError``; field errors
    surface as pydantic's own ValidationError (handled globally as 400).
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return schema.model_validate(payload)
