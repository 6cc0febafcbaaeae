from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class CastType(str, Enum):
    """Cast tags understood by the schema."""
    UUID = "uuid"
    INT = "int"
    INTEGER = "integer"
    REAL = "real"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BOOL = "bool"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    JSON = "json"
    COLLECTION = "collection"
    DATE = "date"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    
    @classmethod
    def parse(cls, tag: Optional[str]) -> Optional[CastType]:
        """Resolve a tag to its enum member, or None when the tag is unknown."""
        if tag is None:
            return None
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            return None


# Storage representation -> native value
CAST_AS_DEFINITIONS: Dict[CastType, str] = {
    CastType.UUID: 'as_string',
    CastType.INT: 'as_int',
    CastType.INTEGER: 'as_int',
    CastType.REAL: 'as_float',
    CastType.FLOAT: 'as_float',
    CastType.DOUBLE: 'as_float',
    CastType.STRING: 'as_string',
    CastType.BOOL: 'as_bool',
    CastType.BOOLEAN: 'as_bool',
    CastType.OBJECT: 'as_object',
    CastType.ARRAY: 'from_json',
    CastType.JSON: 'from_json',
    CastType.COLLECTION: 'as_collection',
    CastType.DATE: 'as_date',
    CastType.DATETIME: 'as_date_time',
    CastType.TIMESTAMP: 'as_timestamp',
}

# Native value -> storage representation
CAST_TO_DEFINITIONS: Dict[CastType, str] = {
    CastType.DATE: 'cast_as_date',
    CastType.DATETIME: 'cast_as_date_time',
    CastType.OBJECT: 'cast_attribute_as_json',
    CastType.ARRAY: 'cast_attribute_as_json',
    CastType.JSON: 'cast_attribute_as_json',
    CastType.COLLECTION: 'cast_attribute_as_json',
}

VALIDATION_RULES: Dict[CastType, str] = {
    CastType.BOOL: 'boolean',
    CastType.BOOLEAN: 'boolean',
    CastType.INT: 'integer',
    CastType.INTEGER: 'integer',
    CastType.REAL: 'numeric',
    CastType.FLOAT: 'numeric',
    CastType.DOUBLE: 'numeric',
    CastType.DATETIME: 'date',
}


def rule_for_cast(tag: str) -> str:
    """Convert a cast tag to the validation rule that checks it."""
    cast_type = CastType.parse(tag)
    if cast_type is None:
        return tag
    return VALIDATION_RULES.get(cast_type, tag)
