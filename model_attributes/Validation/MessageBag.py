from __future__ import annotations

from typing import Dict, List, Optional


class MessageBag:
    """Container for validation error messages keyed by attribute."""
    
    def __init__(self, messages: Optional[Dict[str, List[str]]] = None) -> None:
        self._messages: Dict[str, List[str]] = {
            key: list(values) for key, values in (messages or {}).items()
        }
    
    def add(self, key: str, message: str) -> 'MessageBag':
        """Add a message to the bag."""
        self._messages.setdefault(key, []).append(message)
        return self
    
    def messages(self) -> Dict[str, List[str]]:
        """Get the messages grouped by attribute."""
        return {key: list(values) for key, values in self._messages.items()}
    
    def all(self) -> List[str]:
        """Get every message as a flat list."""
        return [message for values in self._messages.values() for message in values]
    
    def get(self, key: str) -> List[str]:
        """Get the messages for an attribute."""
        return list(self._messages.get(key, []))
    
    def first(self, key: Optional[str] = None) -> Optional[str]:
        """Get the first message, optionally for a given attribute."""
        messages = self.get(key) if key is not None else self.all()
        return messages[0] if messages else None
    
    def has(self, key: str) -> bool:
        """Determine if messages exist for an attribute."""
        return bool(self._messages.get(key))
    
    def is_empty(self) -> bool:
        return self.count() == 0
    
    def count(self) -> int:
        return len(self.all())
    
    def __len__(self) -> int:
        return self.count()
    
    def __repr__(self) -> str:
        return f"MessageBag({self._messages!r})"
