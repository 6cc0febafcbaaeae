from __future__ import annotations

from .CastType import CastType, CAST_AS_DEFINITIONS, CAST_TO_DEFINITIONS, VALIDATION_RULES, rule_for_cast

__all__ = ['CastType', 'CAST_AS_DEFINITIONS', 'CAST_TO_DEFINITIONS', 'VALIDATION_RULES', 'rule_for_cast']
