from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from model_attributes.Casts import CastType
from model_attributes.Support import Str
from model_attributes.Utils import get_logger

logger = get_logger(__name__)

Setter = Callable[[Any, Any], Any]
Authorizer = Callable[[Any, str], Any]


class AttributeOptions(BaseModel):
    """Options declared for one attribute in a model's schema."""

    model_config = ConfigDict(extra='forbid', frozen=True, arbitrary_types_allowed=True)

    cast: Optional[str] = None
    guarded: bool = False
    fillable: bool = False
    hidden: bool = False
    default: Any = None
    rules: Optional[str] = None
    auth: Optional[Union[str, Callable[..., Any]]] = None

    @field_validator('cast', mode='before')
    @classmethod
    def normalize_cast(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v).strip().lower()

    @field_validator('rules', mode='before')
    @classmethod
    def join_rules(cls, v: Any) -> Optional[str]:
        if isinstance(v, (list, tuple)):
            return '|'.join(str(rule) for rule in v)
        return v

    def declares(self, entry: str) -> bool:
        """Whether the option was given in the schema, even with a falsy value."""
        return entry in self.model_fields_set


@dataclass(frozen=True)
class AttributeCapabilities:
    """Everything resolved for one attribute when its model class is created."""

    name: str
    options: AttributeOptions
    cast_type: Optional[CastType] = None
    setter: Optional[Setter] = None
    authorizer: Optional[Authorizer] = None


def setter_method_name(key: str) -> str:
    return f"set_{Str.snake(key)}_attribute"


def auth_method_name(key: str) -> str:
    return f"auth_{Str.snake(key)}_attribute"


def _resolve_authorizer(model_class: type, key: str, options: AttributeOptions) -> Optional[Authorizer]:
    # Schema-declared check first, then the conventionally named method
    if options.auth is not None:
        if callable(options.auth):
            return options.auth
        method = getattr(model_class, options.auth, None)
        if callable(method):
            return method
        logger.warning(
            "Auth method declared in schema does not exist",
            {'model': model_class.__name__, 'attribute': key, 'method': options.auth}
        )

    method = getattr(model_class, auth_method_name(key), None)
    return method if callable(method) else None


def build_attribute_table(model_class: type, schema: Dict[str, Dict[str, Any]]) -> Dict[str, AttributeCapabilities]:
    """Parse a schema declaration into the per-field capability table."""
    table: Dict[str, AttributeCapabilities] = {}

    for key, declaration in schema.items():
        options = AttributeOptions(**(declaration or {}))
        setter = getattr(model_class, setter_method_name(key), None)

        table[key] = AttributeCapabilities(
            name=key,
            options=options,
            cast_type=CastType.parse(options.cast),
            setter=setter if callable(setter) else None,
            authorizer=_resolve_authorizer(model_class, key, options),
        )

    logger.debug(
        "Registered attribute schema",
        {'model': model_class.__name__, 'attributes': len(table)}
    )

    return table


def attributes_declaring(table: Dict[str, AttributeCapabilities], entry: str) -> List[str]:
    """Keys whose schema entry is declared and truthy."""
    return [
        key for key, capability in table.items()
        if capability.options.declares(entry) and getattr(capability.options, entry)
    ]
