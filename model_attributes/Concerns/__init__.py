from __future__ import annotations

from .Schema import AttributeOptions, AttributeCapabilities, build_attribute_table
from .HasAttributes import HasAttributes

__all__ = ['AttributeOptions', 'AttributeCapabilities', 'build_attribute_table', 'HasAttributes']
