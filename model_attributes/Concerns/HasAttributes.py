from __future__ import annotations

import json
from datetime import date
from typing import Any, Callable, ClassVar, Dict, List, Optional, Union

from model_attributes.Casts import CAST_AS_DEFINITIONS, CAST_TO_DEFINITIONS, CastType, rule_for_cast
from model_attributes.Concerns.Schema import (
    AttributeCapabilities,
    attributes_declaring,
    auth_method_name,
    build_attribute_table,
)
from model_attributes.Support import Arr, Collection, Str
from model_attributes.Utils import get_logger
from model_attributes.Validation import MessageBag, Validator

logger = get_logger(__name__)

JSON_PATH_SEPARATOR = '->'


class HasAttributes:
    """
    Schema-driven attribute casting, guarding and validation.

    Mixed into a model that declares ``__schema__``, a mapping of attribute
    name to options (cast, guarded, fillable, hidden, default, rules, auth).
    The schema is resolved into a capability table when the class is created,
    so setters and authorization checks are looked up once per class.

    The host model supplies the attribute bag and the ORM facts this concern
    reads: ``exists``, ``get_dirty()``, ``get_key_name()``, ``get_key_type()``,
    ``get_incrementing()``, ``read_attribute()``, ``write_attribute()`` and the
    JSON/date helpers.
    """

    __schema__: ClassVar[Dict[str, Dict[str, Any]]] = {}
    __attribute_table__: ClassVar[Dict[str, AttributeCapabilities]] = {}

    cast_as_definitions: ClassVar[Dict[CastType, str]] = CAST_AS_DEFINITIONS
    cast_to_definitions: ClassVar[Dict[CastType, str]] = CAST_TO_DEFINITIONS

    _validator = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.__attribute_table__ = build_attribute_table(cls, cls.__schema__)

    # Schema structure
    def get_attributes_from_structure(self, entry: Optional[str] = None, with_value: bool = False) -> Union[List[str], Dict[str, Any]]:
        """
        Read the schema.

        Without an entry, return every attribute name. With an entry, return
        the names whose entry is truthy, or with ``with_value`` a mapping of
        name to value for every attribute that declares the entry.
        """
        table = self.__attribute_table__

        if entry is None:
            return list(table.keys())

        if with_value:
            return {
                key: getattr(capability.options, entry)
                for key, capability in table.items()
                if capability.options.declares(entry)
            }

        return attributes_declaring(table, entry)

    def get_valid_attributes(self) -> List[str]:
        """Return a list of the attributes on this model."""
        return list(self.__attribute_table__.keys())

    def is_valid_attribute(self, key: str) -> bool:
        """Is key a valid attribute?"""
        return key in self.__attribute_table__

    def get_guarded(self) -> List[str]:
        return attributes_declaring(self.__attribute_table__, 'guarded')

    def get_fillable(self) -> List[str]:
        return attributes_declaring(self.__attribute_table__, 'fillable')

    def get_hidden(self) -> List[str]:
        return attributes_declaring(self.__attribute_table__, 'hidden')

    def is_fillable(self, key: str) -> bool:
        """Check if attribute is mass assignable."""
        fillable = self.get_fillable()
        if fillable:
            return key in fillable
        return self.is_valid_attribute(key) and key not in self.get_guarded()

    # Write access
    def has_write_access(self, key: str, unguarded: bool = False) -> bool:
        """
        Has write access to a given key on this model.

        Order: the explicit ``unguarded`` bypass, the guarded list, then the
        authorization check resolved for the attribute (schema ``auth`` or
        ``auth_<key>_attribute``). Attributes without a check are writable.
        """
        if unguarded:
            return True

        if key in self.get_guarded():
            return False

        method = self.get_auth_method(key)
        if method is not None:
            return bool(method(self, key))

        return True

    def get_auths(self) -> Dict[str, Any]:
        """Get the auth entries declared in the schema."""
        return self.get_attributes_from_structure('auth', True)  # type: ignore[return-value]

    def get_auth_method(self, key: str) -> Optional[Callable[[Any, str], Any]]:
        capability = self.__attribute_table__.get(key)
        return capability.authorizer if capability is not None else None

    def has_auth_attribute_mutator(self, key: str) -> bool:
        """Determine if an ``auth_<key>_attribute`` method exists for an attribute."""
        return callable(getattr(type(self), auth_method_name(key), None))

    def has_set_mutator(self, key: str) -> bool:
        capability = self.__attribute_table__.get(key)
        return capability is not None and capability.setter is not None

    def assign_attribute(self, key: str, value: Any, unguarded: bool = False) -> bool:
        """
        Set a schema attribute if it may be written.

        Writes that are refused are dropped, not raised; the return value
        tells the caller whether the value was stored.
        """
        if not self.is_valid_attribute(key) or not self.has_write_access(key, unguarded):
            logger.debug(
                "Attribute write refused",
                {'model': type(self).__name__, 'attribute': key}
            )
            return False

        self.set_attribute(key, value)
        return True

    def __setattr__(self, key: str, value: Any) -> None:
        if key in self.__attribute_table__:
            self.assign_attribute(key, value)
            return

        super().__setattr__(key, value)

    # Defaults
    def set_default_values_for_attributes(self) -> 'HasAttributes':
        """Set default values on new models for attributes not given a value."""
        if self.exists:  # type: ignore[attr-defined]
            return self

        defaults = self.get_attributes_from_structure('default', True)

        # Remove attributes that have been given values
        defaults = Arr.except_(defaults, list(self.get_dirty().keys()))  # type: ignore[attr-defined,arg-type]

        for key, value in defaults.items():
            self.assign_attribute(key, value, unguarded=True)

        return self

    # Casting
    def get_casts(self) -> Dict[str, str]:
        """Get the casts, led by the key type when the key is auto-incrementing."""
        casts = {
            key: capability.options.cast
            for key, capability in self.__attribute_table__.items()
            if capability.options.cast is not None
        }

        if self.get_incrementing():  # type: ignore[attr-defined]
            return {self.get_key_name(): self.get_key_type(), **casts}  # type: ignore[attr-defined]

        return casts

    def get_cast_type(self, key: str) -> Optional[str]:
        cast = self.get_casts().get(key)
        return cast.strip().lower() if cast is not None else None

    def get_cast_as_definition(self, cast_type: Optional[str]) -> Optional[str]:
        """Get the method to cast this attribute type to its native form."""
        resolved = CastType.parse(cast_type)
        if resolved is None:
            return None
        return self.cast_as_definitions.get(resolved)

    def get_cast_to_definition(self, cast_type: Optional[str]) -> Optional[str]:
        """Get the method to cast this attribute type back to its storage form."""
        resolved = CastType.parse(cast_type)
        if resolved is None:
            return None
        return self.cast_to_definitions.get(resolved)

    def get_cast_as_method(self, key: str) -> Optional[Callable[[Any], Any]]:
        definition = self.get_cast_as_definition(self.get_cast_type(key))
        return getattr(self, definition, None) if definition else None

    def get_cast_to_method(self, key: str) -> Optional[Callable[[str, Any], Any]]:
        definition = self.get_cast_to_definition(self.get_cast_type(key))
        return getattr(self, definition, None) if definition else None

    def cast_attribute(self, key: str, value: Any) -> Any:
        """Cast an attribute from its storage form to a native Python type."""
        if value is None:
            return value

        method = self.get_cast_as_method(key)
        if method is None:
            return value

        return method(value)

    def get_attribute(self, key: str) -> Any:
        """Get an attribute value with casting."""
        return self.cast_attribute(key, self.read_attribute(key))  # type: ignore[attr-defined]

    def set_attribute(self, key: str, value: Any) -> 'HasAttributes':
        """
        Set a given attribute on the model.

        A ``set_<key>_attribute`` mutator takes over completely. Otherwise the
        value goes through the storage cast for its type, JSON path keys such
        as ``options->theme`` update the nested value, and anything else is
        written to the attribute bag.
        """
        capability = self.__attribute_table__.get(key)
        if capability is not None and capability.setter is not None:
            capability.setter(self, value)
            return self

        method = self.get_cast_to_method(key)
        if method is not None:
            value = method(key, value)

        if Str.contains(key, JSON_PATH_SEPARATOR):
            return self.fill_json_attribute(key, value)  # type: ignore[attr-defined,no-any-return]

        if '.' in key and not self.is_valid_attribute(key):
            return self.fill_json_attribute(key, value)  # type: ignore[attr-defined,no-any-return]

        self.write_attribute(key, value)  # type: ignore[attr-defined]
        return self

    # Read direction
    def as_int(self, value: Any) -> int:
        return int(value)

    def as_float(self, value: Any) -> float:
        return float(value)

    def as_string(self, value: Any) -> str:
        return str(value)

    def as_bool(self, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() not in ('', '0', 'false', 'no', 'off')
        return bool(value)

    def as_object(self, value: Any) -> Any:
        return self.from_json(value)  # type: ignore[attr-defined]

    def as_collection(self, value: Any) -> Collection[Any]:
        return Collection(self.from_json(value))  # type: ignore[attr-defined]

    def as_date(self, value: Any) -> date:
        return self.as_date_time(value).date()  # type: ignore[attr-defined,no-any-return]

    def as_timestamp(self, value: Any) -> int:
        return int(self.as_date_time(value).timestamp())  # type: ignore[attr-defined]

    # Write direction
    def cast_as_date(self, key: str, value: Any) -> Any:
        return self.from_date(value)  # type: ignore[attr-defined]

    def cast_as_date_time(self, key: str, value: Any) -> Any:
        return self.from_date_time(value)  # type: ignore[attr-defined]

    def cast_attribute_as_json(self, key: str, value: Any) -> Optional[str]:
        if value is None:
            return value

        # Text is taken as already encoded only when it decodes
        if isinstance(value, str):
            try:
                json.loads(value)
            except ValueError:
                pass
            else:
                return value

        return self.as_json(value)  # type: ignore[attr-defined,no-any-return]

    # Validation
    def get_attribute_rules(self) -> Dict[str, str]:
        """Get the pipe-delimited validation rules for each attribute."""
        result: Dict[str, List[str]] = {}

        for key in self.get_valid_attributes():
            result[key] = ['sometimes'] if self.exists else []  # type: ignore[attr-defined]

        for key, cast_type in self.get_casts().items():
            result.setdefault(key, []).append(rule_for_cast(cast_type))

        for key, rule in self.get_attributes_from_structure('rules', True).items():  # type: ignore[union-attr]
            if rule:
                result.setdefault(key, []).append(rule)

        result.pop(self.get_key_name(), None)  # type: ignore[attr-defined]

        return {key: '|'.join(rules) for key, rules in result.items()}

    def saving_validation(self) -> bool:
        """Validate the pending changes before saving."""
        self._validator = Validator.make(self.get_dirty(), self.get_attribute_rules())  # type: ignore[attr-defined]

        if self._validator.fails():
            logger.info(
                "Attribute validation failed",
                {'model': type(self).__name__, 'attributes': ','.join(self._validator.errors().messages().keys())}
            )
            return False

        return True

    def get_validator(self) -> Optional[Validator]:
        return self._validator

    def get_invalid_attributes(self) -> Dict[str, List[str]]:
        """Get the error messages keyed by attribute from the last validation."""
        validator = self.get_validator()
        if validator is None:
            return {}

        return validator.errors().messages()

    def get_invalid_message(self) -> List[str]:
        """Get every error message from the last validation."""
        validator = self.get_validator()
        if validator is None:
            return []

        return validator.errors().all()

    def get_error_bag(self) -> MessageBag:
        validator = self.get_validator()
        if validator is None:
            return MessageBag()
        return validator.errors()
