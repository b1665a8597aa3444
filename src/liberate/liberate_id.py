"""
Core identifiers.

A CoreId is identified solely by its unique.  The name and the exported flag
are carried along for display and for deciding whether a binding may be seen
from outside the compilation unit, but two ids with the same unique always
denote the same binder.  This is what lets a localized copy of a binder
shadow the original: it compares equal to it, so references inside the copy
resolve to the copy.
"""

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class CoreId:
    """An identifier: a unique plus display information."""
    unique: int
    name: str = field(compare=False)
    is_exported: bool = field(default=False, compare=False)

    @property
    def display_name(self) -> str:
        """Name used by the pretty printer."""
        if self.is_exported:
            return self.name

        return f"{self.name}_{self.unique}"


def localize_id(ident: CoreId) -> CoreId:
    """
    Return an internal-only alias of *ident*.

    The alias keeps the unique, drops the exported flag and strips any module
    qualifier from the name, so that a copy of the binding can float freely
    without clashing with the exported original.
    """
    qualifier, _, base = ident.name.rpartition('.')
    name = base if qualifier and base else ident.name
    return replace(ident, name=name, is_exported=False)
