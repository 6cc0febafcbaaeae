"""
Schema-driven attribute casting, guarding and validation for SQLAlchemy models.
"""
from __future__ import annotations

from .Casts import CastType
from .Concerns import AttributeCapabilities, AttributeOptions, HasAttributes
from .Models import Base, Model
from .Support import Collection
from .Validation import MessageBag, ValidationException, Validator

__version__ = "1.0.0"

__all__ = [
    'AttributeCapabilities',
    'AttributeOptions',
    'Base',
    'CastType',
    'Collection',
    'HasAttributes',
    'MessageBag',
    'Model',
    'ValidationException',
    'Validator',
]
