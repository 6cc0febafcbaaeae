from __future__ import annotations

from typing import Any, ClassVar, Dict, List
from datetime import date, datetime
import json

from sqlalchemy import Integer, event, inspect
from sqlalchemy.orm import DeclarativeBase

from model_attributes.config import settings
from model_attributes.Concerns.HasAttributes import HasAttributes
from model_attributes.Support import Arr, Collection
from model_attributes.Utils import get_logger
from model_attributes.Validation import ValidationException

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class Model(HasAttributes, Base):
    """
    Base model with a declared attribute schema.

    Subclasses map their columns with SQLAlchemy as usual and describe them
    in ``__schema__``::

        class Post(Model):
            __tablename__ = 'posts'
            id: Mapped[int] = mapped_column(primary_key=True)
            title: Mapped[Optional[str]] = mapped_column(String(255))

            __schema__ = {
                'id': {'cast': 'integer', 'guarded': True},
                'title': {'cast': 'string', 'rules': 'max:255', 'fillable': True},
            }

    Column values are kept in their storage form; ``get_attribute()`` returns
    the cast value.
    """
    __abstract__ = True

    __schema__: ClassVar[Dict[str, Dict[str, Any]]] = {}

    # Run defaults and validation from the flush hooks
    __validates_on_save__: ClassVar[bool] = settings.VALIDATE_ON_SAVE

    def __init__(self, **kwargs: Any) -> None:
        super().__init__()
        self.fill(kwargs)

    # Attribute bag
    def read_attribute(self, key: str) -> Any:
        """Get the stored value of an attribute, without casting."""
        return getattr(self, key, None)

    def write_attribute(self, key: str, value: Any) -> None:
        """Store a value in the attribute bag, bypassing guards and casts."""
        super(HasAttributes, self).__setattr__(key, value)

    def get_attributes(self) -> Dict[str, Any]:
        """Get the loaded column values."""
        state_dict = inspect(self).dict
        return {key: state_dict[key] for key in self._column_keys() if key in state_dict}

    @classmethod
    def _column_keys(cls) -> List[str]:
        return [prop.key for prop in inspect(cls).column_attrs]

    # Host ORM facts
    @property
    def exists(self) -> bool:
        """Whether the model has been persisted (and not deleted)."""
        state = inspect(self)
        return state.has_identity and not state.deleted and not state.was_deleted

    def get_dirty(self) -> Dict[str, Any]:
        """Get the attributes that have been changed since last sync."""
        state = inspect(self)
        dirty: Dict[str, Any] = {}

        for key in self._column_keys():
            history = state.attrs[key].history
            if history.added:
                dirty[key] = history.added[0]

        return dirty

    def is_dirty(self, *keys: str) -> bool:
        dirty = self.get_dirty()
        if not keys:
            return bool(dirty)
        return any(key in dirty for key in keys)

    def get_key_name(self) -> str:
        mapper = inspect(type(self))
        return mapper.get_property_by_column(mapper.primary_key[0]).key

    def get_key_type(self) -> str:
        column = inspect(type(self)).primary_key[0]
        return 'int' if isinstance(column.type, Integer) else 'string'

    def get_incrementing(self) -> bool:
        primary_key = inspect(type(self)).primary_key
        if len(primary_key) != 1:
            return False

        column = primary_key[0]
        if column.autoincrement is True:
            return True
        return column.autoincrement == 'auto' and isinstance(column.type, Integer) and not column.foreign_keys

    # Mass assignment
    def fill(self, attributes: Dict[str, Any]) -> Model:
        """Laravel-style mass assignment with fillable/guarded protection."""
        for key, value in attributes.items():
            if self.is_fillable(key):
                self.assign_attribute(key, value)
            else:
                logger.debug(
                    "Attribute is not mass assignable",
                    {'model': type(self).__name__, 'attribute': key}
                )
        return self

    def force_fill(self, attributes: Dict[str, Any]) -> Model:
        """Mass assignment without fillable or guard checks."""
        for key, value in attributes.items():
            self.assign_attribute(key, value, unguarded=True)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary of cast values, without hidden attributes."""
        hidden = self.get_hidden()
        return {
            key: self.get_attribute(key)
            for key in self._column_keys()
            if key not in hidden
        }

    # JSON helpers
    def from_json(self, value: Any) -> Any:
        """Decode a JSON storage value; already-decoded values pass through."""
        if isinstance(value, (bytes, bytearray)):
            value = value.decode('utf-8')
        if not isinstance(value, str):
            return value
        return json.loads(value)

    def as_json(self, value: Any) -> str:
        if isinstance(value, Collection):
            value = value.to_array()
        return json.dumps(value)

    def fill_json_attribute(self, key: str, value: Any) -> Model:
        """Set a nested value inside a JSON attribute, e.g. ``options->theme``."""
        root, *nested = Arr.segments(key)

        current = self.from_json(self.read_attribute(root))
        if not isinstance(current, dict):
            current = {}

        Arr.set(current, '.'.join(nested), value)
        self.write_attribute(root, self.as_json(current))
        return self

    # Date helpers
    def as_date_time(self, value: Any) -> datetime:
        """Return a datetime for a datetime, date, unix timestamp or date string."""
        if isinstance(value, datetime):
            return value

        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value)

        text = str(value).strip()
        for fmt in (settings.DATE_FORMAT, settings.DATE_ONLY_FORMAT):
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

        return datetime.fromisoformat(text.replace('Z', '+00:00'))

    def from_date_time(self, value: Any) -> Any:
        """Convert a date value to its storage string."""
        if value is None or value == '':
            return value
        return self.as_date_time(value).strftime(settings.DATE_FORMAT)

    def from_date(self, value: Any) -> Any:
        """Convert a date value to its date-only storage string."""
        if value is None or value == '':
            return value
        return self.as_date_time(value).strftime(settings.DATE_ONLY_FORMAT)


def _validate_before_save(target: Model) -> None:
    if not target.__validates_on_save__:
        return

    if not target.saving_validation():
        raise ValidationException(target.get_invalid_attributes())


@event.listens_for(Model, 'before_insert', propagate=True)
def prepare_attributes_before_insert(mapper: Any, connection: Any, target: Model) -> None:
    """Populate schema defaults and validate new records."""
    del mapper, connection  # Unused parameters required by SQLAlchemy
    target.set_default_values_for_attributes()
    _validate_before_save(target)


@event.listens_for(Model, 'before_update', propagate=True)
def validate_attributes_before_update(mapper: Any, connection: Any, target: Model) -> None:
    """Validate changed attributes of persisted records."""
    del mapper, connection  # Unused parameters required by SQLAlchemy
    _validate_before_save(target)
