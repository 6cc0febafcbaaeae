from __future__ import annotations

from typing import Any, Dict, List, Callable, Optional, Tuple, Union
from abc import ABC, abstractmethod
import re

from model_attributes.Validation.MessageBag import MessageBag

RuleSet = Union[str, List[str]]


class ValidationRule(ABC):
    """Base validation rule."""

    @abstractmethod
    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        """Determine if the validation rule passes."""
        pass

    @abstractmethod
    def message(self) -> str:
        """Get the validation error message."""
        pass


class RequiredRule(ValidationRule):
    """Required validation rule."""

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return len(value.strip()) > 0
        if isinstance(value, (list, dict)):
            return len(value) > 0
        return True

    def message(self) -> str:
        return "The {attribute} field is required."


class EmailRule(ValidationRule):
    """Email validation rule."""

    PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        return isinstance(value, str) and self.PATTERN.match(value) is not None

    def message(self) -> str:
        return "The {attribute} must be a valid email address."


def _measure(value: Any) -> Optional[float]:
    """Length of strings and containers, or the value of a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (str, list, dict)):
        return len(value)
    return None


class MinRule(ValidationRule):
    """Minimum length/value validation rule."""

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if not parameters:
            return False
        size = _measure(value)
        return size is not None and size >= float(parameters[0])

    def message(self) -> str:
        return "The {attribute} must be at least {min} characters."


class MaxRule(ValidationRule):
    """Maximum length/value validation rule."""

    def passes(self, attribute: str, value: Any, parameters: Optional[List[str]] = None) -> bool:
        if not parameters:
            return False
        size = _measure(value)
        return size is not None and size <= float(parameters[0])

    def message(self) -> str:
        return "The {attribute} may not be greater than {max} characters."


class ValidationException(Exception):
    """Raised when data fails validation; carries the messages by attribute."""

    def __init__(self, errors: Dict[str, List[str]], message: str = "The given data was invalid.") -> None:
        self.errors = errors
        self.message = message
        super().__init__(message)

    def get_errors(self) -> Dict[str, List[str]]:
        return self.errors

    def get_first_error(self, field: Optional[str] = None) -> Optional[str]:
        """Get the first message, optionally for a given attribute."""
        if field is not None:
            messages = self.errors.get(field) or []
            return messages[0] if messages else None

        for messages in self.errors.values():
            if messages:
                return messages[0]

        return None


class Validator:
    """
    Laravel-style validator over a flat data dict and pipe-delimited rules.

    ``required`` runs for every field listed in the rules. The remaining rules
    only run when the field holds a value, so optional attributes that were
    never given are not reported. ``sometimes`` skips fields missing from the
    data altogether and ``nullable`` accepts ``None`` or an empty string.
    Rule names without a registered rule are ignored.
    """

    IMPLICIT_RULES = ('required',)
    MARKER_RULES = ('nullable', 'sometimes')

    def __init__(self, data: Dict[str, Any], rules: Dict[str, RuleSet], messages: Optional[Dict[str, str]] = None, attributes: Optional[Dict[str, str]] = None) -> None:
        self.data = data
        self.rules = rules
        self.custom_messages = messages or {}
        self.custom_attributes = attributes or {}
        self.bail_on_first_failure = False
        self.stop_on_first_failure = False
        self.validated_data: Dict[str, Any] = {}
        self.invalid_data: Dict[str, Any] = {}
        self.after_validation_hooks: List[Callable[[Validator], None]] = []
        self._messages = MessageBag()
        self._has_run = False

        self.rule_classes: Dict[str, ValidationRule] = {
            'required': RequiredRule(),
            'email': EmailRule(),
            'min': MinRule(),
            'max': MaxRule(),
        }

        self._load_type_rules()

    @classmethod
    def make(cls, data: Dict[str, Any], rules: Dict[str, RuleSet], messages: Optional[Dict[str, str]] = None, attributes: Optional[Dict[str, str]] = None) -> 'Validator':
        """Create a validator instance."""
        return cls(data, rules, messages, attributes)

    def validate(self) -> Dict[str, Any]:
        """Validate the data, raising ValidationException on failure."""
        self._messages = MessageBag()
        self.validated_data = {}
        self.invalid_data = {}

        for field, field_rules in self.rules.items():
            rule_list = self._parse_rule_list(field_rules)

            if 'sometimes' in rule_list and field not in self.data:
                continue

            if not self._validate_field(field, rule_list) and self.stop_on_first_failure:
                break

        self._has_run = True

        for hook in self.after_validation_hooks:
            hook(self)

        if not self._messages.is_empty():
            raise ValidationException(self._messages.messages())

        return self.validated_data

    def _validate_field(self, field: str, rule_list: List[str]) -> bool:
        """Run one field's rules, recording failures. Returns whether it passed."""
        value = self.data.get(field)
        parsed = [self._parse_rule(rule_str) for rule_str in rule_list]
        names = [rule_name for rule_name, _ in parsed]

        if 'nullable' in names and (value is None or value == ''):
            self.validated_data[field] = value
            return True

        required = any(rule_name in self.IMPLICIT_RULES for rule_name in names)
        if not required and self._is_empty(value):
            return True

        passed = True

        for rule_name, parameters in parsed:
            if rule_name in self.MARKER_RULES:
                continue

            rule = self.rule_classes.get(rule_name)
            if rule is None:
                continue

            try:
                ok = rule.passes(field, value, parameters)
                message = None if ok else self._get_error_message(field, rule_name, rule, parameters)
            except (TypeError, ValueError) as e:
                ok = False
                message = f"Validation error for {field}: {e}"

            if not ok:
                self._add_failure(field, value, message or '')
                passed = False

                # An empty required field has nothing else worth reporting
                if self.bail_on_first_failure or rule_name in self.IMPLICIT_RULES:
                    break

        if passed:
            self.validated_data[field] = value

        return passed

    def _add_failure(self, field: str, value: Any, message: str) -> None:
        self._messages.add(field, message)
        self.invalid_data[field] = value

    @staticmethod
    def _parse_rule_list(field_rules: RuleSet) -> List[str]:
        rules = field_rules.split('|') if isinstance(field_rules, str) else field_rules
        return [rule.strip() for rule in rules if rule.strip()]

    @staticmethod
    def _parse_rule(rule_str: str) -> Tuple[str, List[str]]:
        if ':' not in rule_str:
            return rule_str, []
        rule_name, params_str = rule_str.split(':', 1)
        # regex patterns may contain commas
        if rule_name == 'regex':
            return rule_name, [params_str]
        return rule_name, [p.strip() for p in params_str.split(',')]

    @staticmethod
    def _is_empty(value: Any) -> bool:
        return value is None or (isinstance(value, str) and value.strip() == '')

    def fails(self) -> bool:
        try:
            self.validate()
        except ValidationException:
            return True
        return False

    def passes(self) -> bool:
        return not self.fails()

    def validated(self) -> Dict[str, Any]:
        """Get the data that passed, validating first if needed."""
        if not self._has_run:
            return self.validate()
        if not self._messages.is_empty():
            raise ValidationException(self._messages.messages())
        return self.validated_data

    def invalid(self) -> Dict[str, Any]:
        return self.invalid_data

    def errors(self) -> MessageBag:
        """Get the error message bag, running validation if it has not run yet."""
        if not self._has_run:
            self.passes()
        return self._messages

    def after(self, callback: Callable[['Validator'], None]) -> 'Validator':
        """Add after validation hook."""
        self.after_validation_hooks.append(callback)
        return self

    def stop_on_first(self, stop: bool = True) -> 'Validator':
        """Stop validating further fields once one fails."""
        self.stop_on_first_failure = stop
        return self

    def bail(self, bail: bool = True) -> 'Validator':
        """Stop at the first failing rule of each field."""
        self.bail_on_first_failure = bail
        return self

    def get_attribute_name(self, field: str) -> str:
        return self.custom_attributes.get(field, field.replace('_', ' '))

    def _get_error_message(self, field: str, rule_name: str, rule: ValidationRule, parameters: List[str]) -> str:
        message = self.custom_messages.get(f"{field}.{rule_name}") or self.custom_messages.get(rule_name) or rule.message()
        message = message.replace('{attribute}', self.get_attribute_name(field))

        if parameters:
            placeholder = {'min': '{min}', 'max': '{max}'}.get(rule_name)
            if placeholder:
                message = message.replace(placeholder, parameters[0])
            if rule_name == 'in':
                message = message.replace('{values}', ', '.join(parameters))

        return message

    def _load_type_rules(self) -> None:
        from model_attributes.Validation.Rules import (
            StringRule, AlphaRule, AlphaDashRule, NumericRule, IntegerRule,
            BooleanRule, DateRule, UuidRule, JsonRule, ArrayRule, InRule,
            RegexRule
        )

        self.rule_classes.update({
            'string': StringRule(),
            'alpha': AlphaRule(),
            'alpha_dash': AlphaDashRule(),
            'numeric': NumericRule(),
            'integer': IntegerRule(),
            'boolean': BooleanRule(),
            'date': DateRule(),
            'uuid': UuidRule(),
            'json': JsonRule(),
            'array': ArrayRule(),
            'in': InRule(),
            'regex': RegexRule(),
        })

    def extend_rule(self, name: str, rule: ValidationRule) -> 'Validator':
        """Register a rule instance under a name for this validator."""
        self.rule_classes[name] = rule
        return self


def make_validator(data: Dict[str, Any], rules: Dict[str, RuleSet], messages: Optional[Dict[str, str]] = None, attributes: Optional[Dict[str, str]] = None) -> Validator:
    """Create a validator instance."""
    return Validator(data, rules, messages, attributes)


__all__ = [
    'ValidationRule',
    'RequiredRule',
    'EmailRule',
    'MinRule',
    'MaxRule',
    'Validator',
    'ValidationException',
    'make_validator',
]
