# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""JVM class names, types and their descriptor renderings."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ClassName:
    """Represent a JVM class name in internal (slash-delimited) form.

    Attributes:
        internal: Internal name such as ``java/lang/String``.
    """

    internal: str

    @classmethod
    def from_internal_name(cls, internal_name: str) -> "ClassName":
        """Wrap an internal name verbatim.

        Args:
            internal_name: Slash-delimited class name.

        Returns:
            Class name value.
        """
        return cls(internal=internal_name)

    @classmethod
    def from_binary_name(cls, binary_name: str) -> "ClassName":
        """Build a class name from a dot-delimited binary name.

        Args:
            binary_name: Dot-delimited class name such as ``java.lang.String``.

        Returns:
            Class name value.
        """
        return cls(internal=binary_name.replace(".", "/"))

    def internal_name(self) -> str:
        return self.internal

    def binary_name(self) -> str:
        return self.internal.replace("/", ".")

    def to_type(self) -> "ObjectType":
        """Wrap this class name into an object type."""
        return ObjectType(class_name=self)

    def __str__(self) -> str:
        return self.internal


class Type(ABC):
    """Base of the JVM type union.

    Variants are :class:`ObjectType`, :class:`ArrayType` and the
    :class:`PrimitiveType` singletons exported by this module.
    """

    @abstractmethod
    def descriptor(self) -> str:
        """Render the JVM bytecode descriptor, e.g. ``Ljava/lang/String;``."""

    @abstractmethod
    def java_name(self) -> str:
        """Render the Java source name, e.g. ``java.lang.String[]``."""

    def array(self) -> "ArrayType":
        """Return an array type with this type as its element type."""
        return ArrayType(element_type=self)

    def array_depth(self) -> int:
        """Return the number of array layers; 0 for non-array types."""
        return 0

    def __str__(self) -> str:
        return self.descriptor()


@dataclass(frozen=True)
class ObjectType(Type):
    """Named object type (``L<class name>;``)."""

    class_name: ClassName

    def descriptor(self) -> str:
        return f"L{self.class_name.internal_name()};"

    def java_name(self) -> str:
        return self.class_name.binary_name()


@dataclass(frozen=True)
class ArrayType(Type):
    """Array of a nested element type (``[<element>``)."""

    element_type: Type

    def descriptor(self) -> str:
        return f"[{self.element_type.descriptor()}"

    def java_name(self) -> str:
        return f"{self.element_type.java_name()}[]"

    def array_depth(self) -> int:
        return 1 + self.element_type.array_depth()


@dataclass(frozen=True)
class PrimitiveType(Type):
    """Primitive type or the ``void`` pseudo-type.

    Attributes:
        code: Single-letter descriptor.
        keyword: Java keyword naming the type.
    """

    code: str
    keyword: str

    def descriptor(self) -> str:
        return self.code

    def java_name(self) -> str:
        return self.keyword


BYTE = PrimitiveType(code="B", keyword="byte")
SHORT = PrimitiveType(code="S", keyword="short")
INT = PrimitiveType(code="I", keyword="int")
# long and double occupy two local variable slots
LONG = PrimitiveType(code="J", keyword="long")
FLOAT = PrimitiveType(code="F", keyword="float")
DOUBLE = PrimitiveType(code="D", keyword="double")
BOOLEAN = PrimitiveType(code="Z", keyword="boolean")
CHAR = PrimitiveType(code="C", keyword="char")
VOID = PrimitiveType(code="V", keyword="void")

PRIMITIVE_TYPES: tuple[PrimitiveType, ...] = (
    BYTE,
    SHORT,
    INT,
    LONG,
    FLOAT,
    DOUBLE,
    BOOLEAN,
    CHAR,
    VOID,
)
