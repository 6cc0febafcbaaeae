from __future__ import annotations

from typing import Any, Dict, List, Union
import copy
import re

# Nested keys may be written ``a.b`` or ``a->b``
_SEGMENT_SEPARATOR = re.compile(r'\.|->')


class Arr:
    """Dict helpers addressing nested keys by path."""

    @staticmethod
    def segments(key: str) -> List[str]:
        return [segment for segment in _SEGMENT_SEPARATOR.split(key) if segment]

    @staticmethod
    def set(data: Dict[str, Any], key: str, value: Any) -> Dict[str, Any]:
        """Set a nested value, replacing non-dict values on the way."""
        *parents, last = Arr.segments(key)
        current = data

        for segment in parents:
            if not isinstance(current.get(segment), dict):
                current[segment] = {}
            current = current[segment]

        current[last] = value
        return data

    @staticmethod
    def forget(data: Dict[str, Any], key: str) -> Dict[str, Any]:
        *parents, last = Arr.segments(key)
        current: Any = data

        for segment in parents:
            current = current.get(segment) if isinstance(current, dict) else None

        if isinstance(current, dict):
            current.pop(last, None)

        return data

    @staticmethod
    def except_(data: Dict[str, Any], keys: Union[str, List[str]]) -> Dict[str, Any]:
        """Copy of ``data`` without the given keys."""
        result = copy.deepcopy(data)
        for key in ([keys] if isinstance(keys, str) else keys):
            Arr.forget(result, key)
        return result
