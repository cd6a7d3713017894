"""
Utilities module untuk SecureAuth API.
"""

from secureauth.utils.validators import validate_payload, format_error

__all__ = [
    "validate_payload",
    "format_error"
]
