from __future__ import annotations

import re
from typing import Dict, List, Tuple, Union


class Str:
    """Laravel-style string helpers."""

    _snake_cache: Dict[Tuple[str, str], str] = {}

    @staticmethod
    def contains(haystack: str, needles: Union[str, List[str]]) -> bool:
        if isinstance(needles, str):
            needles = [needles]
        return any(needle in haystack for needle in needles)

    @classmethod
    def snake(cls, value: str, delimiter: str = '_') -> str:
        """Convert ``fullName`` or ``full-name`` to ``full_name``."""
        cache_key = (value, delimiter)
        if cache_key not in cls._snake_cache:
            converted = re.sub(r'([a-z0-9])([A-Z])', rf'\1{delimiter}\2', value)
            converted = re.sub(r'[^a-zA-Z0-9]+', delimiter, converted).lower()
            cls._snake_cache[cache_key] = converted.strip(delimiter)
        return cls._snake_cache[cache_key]
