from __future__ import annotations

from .Model import Base, Model

__all__ = ['Base', 'Model']
