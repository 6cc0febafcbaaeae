from .Arr import Arr
from .Str import Str
from .Collection import Collection

__all__ = ['Arr', 'Str', 'Collection']
