from __future__ import annotations

from .Validator import (
    ValidationRule,
    Validator,
    ValidationException,
    make_validator,
)
from .MessageBag import MessageBag

__all__ = [
    'ValidationRule',
    'Validator',
    'ValidationException',
    'MessageBag',
    'make_validator',
]
