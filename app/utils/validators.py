"""
Request body validation helpers.

Handlers validate bodies themselves so a bad payload becomes a 400 with an
itemized list of field errors, e.g.

    ["email: value is not a valid email address", "backlogs: Input should be ..."]
"""

from typing import List, Optional, Tuple, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def is_valid_object_id(value) -> bool:
    """True if value is a 24-hex-char string (or ObjectId) MongoDB accepts as _id."""
    return isinstance(value, (str, ObjectId)) and ObjectId.is_valid(value)


def format_errors(exc: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into 'field: message' strings."""
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        message = err["msg"]
        errors.append(f"{field}: {message}" if field else message)
    return errors


def validate_payload(model: Type[ModelT], payload) -> Tuple[Optional[ModelT], List[str]]:
    """
    Validate a raw JSON body against a schema.

    Returns (instance, []) on success and (None, errors) on failure.
    """
    if not isinstance(payload, dict):
        return None, ["body: expected a JSON object"]
    try:
        return model.model_validate(payload), []
    except ValidationError as e:
        return None, format_errors(e)
