# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Kinds of mappable elements in a mapping file."""

from enum import Enum


class MappedElementKind(Enum):
    """Enumerate the nameable elements of a mapping.

    Top-level and nested classes are not differentiated.
    """

    CLASS = "class"
    FIELD = "field"
    METHOD = "method"
    METHOD_ARG = "method_arg"
    METHOD_VAR = "method_var"

    @property
    def level(self) -> int:
        """Return the nesting level: classes 0, members 1, member attributes 2."""
        return _LEVELS[self]


_LEVELS: dict[MappedElementKind, int] = {
    MappedElementKind.CLASS: 0,
    MappedElementKind.FIELD: 1,
    MappedElementKind.METHOD: 1,
    MappedElementKind.METHOD_ARG: 2,
    MappedElementKind.METHOD_VAR: 2,
}
