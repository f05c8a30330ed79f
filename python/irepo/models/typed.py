"""
The capability of an entity to describe its own type in human-readable terms.
"""
import re
from abc import ABC

_camel_re = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')

def titleize(name: str) -> str:
    """
    turn a class-style name into a display label, e.g. "GenericWork" -> "Generic Work"
    and "file_set" -> "File Set".
    """
    name = name.replace('_', ' ')
    return " ".join(w[0].upper() + w[1:] for w in _camel_re.sub(' ', name).split() if w)

class DescribesOwnType(ABC):
    """
    an interface for entities that can provide a human-readable label for their type.  By default,
    the label is derived from the class name; a class can set ``human_readable_type_label``
    to override it.  The indexing routine consults :py:attr:`human_readable_type` when it
    serializes an entity implementing this interface.
    """
    human_readable_type_label = None
    human_readable_short_description = None

    @classmethod
    def type_label(cls) -> str:
        return cls.human_readable_type_label or titleize(cls.__name__)

    @property
    def human_readable_type(self) -> str:
        """
        the display label for this entity's type
        """
        return self.type_label()
