"""
Type and format validation rules.

Model validation runs over dirty attributes, which hold storage values: JSON
columns carry encoded text and date columns carry formatted strings. The
cast-derived rules (string, integer, numeric, boolean, date, uuid, json,
array) therefore accept the storage form as well as the native one.
"""
from __future__ import annotations

import re
import json
import uuid
from typing import Any, List, Optional
from datetime import date, datetime

from model_attributes.config import settings
from model_attributes.Validation.Validator import ValidationRule


def _decode_json(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode('utf-8')
    return json.loads(value)


class StringRule(ValidationRule):
    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        return isinstance(value, str)

    def message(self) -> str:
        return "The {attribute} field must be a string."


class AlphaRule(ValidationRule):
    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        return isinstance(value, str) and value.isalpha()

    def message(self) -> str:
        return "The {attribute} field must contain only letters."


class AlphaDashRule(ValidationRule):
    """Letters, numbers, dashes and underscores."""

    PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        return isinstance(value, str) and self.PATTERN.match(value) is not None

    def message(self) -> str:
        return "The {attribute} field must contain only letters, numbers, dashes, and underscores."


class NumericRule(ValidationRule):
    """Numbers, or text that parses as one. Booleans are not numeric."""

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if isinstance(value, bool):
            return False

        if isinstance(value, (int, float)):
            return True

        if isinstance(value, str):
            try:
                float(value)
            except ValueError:
                return False
            return True

        return False

    def message(self) -> str:
        return "The {attribute} field must be numeric."


class IntegerRule(ValidationRule):
    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if isinstance(value, bool):
            return False

        if isinstance(value, int):
            return True

        if isinstance(value, str):
            try:
                int(value)
            except ValueError:
                return False
            return True

        return False

    def message(self) -> str:
        return "The {attribute} field must be an integer."


class BooleanRule(ValidationRule):
    ACCEPTED = ('true', 'false', '1', '0', 'yes', 'no')

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if isinstance(value, bool):
            return True

        if isinstance(value, int):
            return value in (0, 1)

        if isinstance(value, str):
            return value.strip().lower() in self.ACCEPTED

        return False

    def message(self) -> str:
        return "The {attribute} field must be true or false."


class DateRule(ValidationRule):
    """
    Dates and datetimes, or text in one of the storage formats.

    ISO 8601 text is accepted too, so values written before a format change
    still validate.
    """

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if isinstance(value, (datetime, date)):
            return True

        if not isinstance(value, str):
            return False

        for fmt in (settings.DATE_FORMAT, settings.DATE_ONLY_FORMAT):
            try:
                datetime.strptime(value, fmt)
                return True
            except ValueError:
                continue

        try:
            datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return False
        return True

    def message(self) -> str:
        return "The {attribute} field must be a valid date."


class UuidRule(ValidationRule):
    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if isinstance(value, uuid.UUID):
            return True

        if not isinstance(value, str):
            return False

        try:
            uuid.UUID(value)
        except ValueError:
            return False
        return True

    def message(self) -> str:
        return "The {attribute} field must be a valid UUID."


class JsonRule(ValidationRule):
    """Decoded JSON values, or text that decodes."""

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if isinstance(value, (dict, list)):
            return True

        if not isinstance(value, (str, bytes, bytearray)):
            return False

        try:
            _decode_json(value)
        except ValueError:
            return False
        return True

    def message(self) -> str:
        return "The {attribute} field must be a valid JSON string."


class ArrayRule(ValidationRule):
    """Lists and mappings, or JSON text encoding one."""

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if isinstance(value, (str, bytes, bytearray)):
            try:
                value = _decode_json(value)
            except ValueError:
                return False

        return isinstance(value, (dict, list, tuple))

    def message(self) -> str:
        return "The {attribute} field must be an array."


class InRule(ValidationRule):
    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        return bool(parameters) and str(value) in parameters  # type: ignore[operator]

    def message(self) -> str:
        return "The selected {attribute} is invalid."


class RegexRule(ValidationRule):
    """Match a pattern, written bare or between ``/`` delimiters."""

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if not parameters or not isinstance(value, str):
            return False

        pattern = parameters[0]
        if len(pattern) > 1 and pattern.startswith('/') and pattern.endswith('/'):
            pattern = pattern[1:-1]

        try:
            return re.match(pattern, value) is not None
        except re.error:
            return False

    def message(self) -> str:
        return "The {attribute} field format is invalid."
