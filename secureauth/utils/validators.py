"""
Input validator untuk SecureAuth API.
Validasi payload registration/login terhadap schema bernama dan mengumpulkan
semua field errors dalam satu pass.
"""

from typing import Any, Dict, List, Mapping, Type, Union

from pydantic import BaseModel, ValidationError

from secureauth.core.constants import ValidationSchema
from secureauth.core.exceptions import ValidationFailure
from secureauth.schemas.auth import LoginRequest, RegisterRequest


SCHEMAS: Dict[str, Type[BaseModel]] = {
    ValidationSchema.REGISTRATION.value: RegisterRequest,
    ValidationSchema.LOGIN.value: LoginRequest,
}

FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "password": "Password",
}


def _field_name(loc: tuple) -> str:
    if not loc:
        return "body"
    return ".".join(str(part) for part in loc)


def format_error(error: Dict[str, Any]) -> Dict[str, str]:
    """
    Ubah satu pydantic error menjadi pesan yang ramah untuk client.

    Args:
        error: Item dari ValidationError.errors()

    Returns:
        Dict dengan field dan message
    """
    field = _field_name(error.get("loc", ()))
    label = FIELD_LABELS.get(field, field.capitalize())
    error_type = error.get("type")
    ctx = error.get("ctx") or {}

    if field == "body":
        message = "Request body must be a JSON object"
    elif error_type == "missing":
        message = f"{label} is required"
    elif error_type == "string_type":
        message = f"{label} must be a string"
    elif error_type == "string_too_short":
        if ctx.get("min_length") == 1:
            message = f"{label} is required"
        else:
            message = f"{label} must be at least {ctx.get('min_length')} characters"
    elif error_type == "string_too_long":
        message = f"{label} cannot exceed {ctx.get('max_length')} characters"
    elif field == "email" and error_type == "value_error":
        message = "Please provide a valid email address"
    else:
        message = error.get("msg", "Invalid value")

    return {"field": field, "message": message}


def validate_payload(
    payload: Any,
    schema: Union[str, ValidationSchema]
) -> Union[RegisterRequest, LoginRequest]:
    """
    Validasi payload terhadap schema bernama.

    Args:
        payload: Structured payload (biasanya dict dari JSON body)
        schema: "registration" atau "login"

    Returns:
        Normalized values (trimmed strings, lowercase email)

    Raises:
        ValidationFailure: Dengan semua field errors sekaligus
        KeyError: Jika nama schema tidak dikenal
    """
    schema_name = schema.value if isinstance(schema, ValidationSchema) else schema
    model = SCHEMAS[schema_name]

    if not isinstance(payload, Mapping):
        raise ValidationFailure([format_error({"loc": (), "type": "model_type"})])

    try:
        return model.model_validate(dict(payload))
    except ValidationError as e:
        errors: List[Dict[str, str]] = [format_error(err) for err in e.errors()]
        raise ValidationFailure(errors) from None
