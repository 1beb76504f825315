# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Mapping visitor contract and visitation errors.

A producer drives a visitor in the following order (``visit_`` prefixes
omitted, lowercase names are cross references):

- overall: ``header -> content -> end -> overall``
- header: ``header -> namespaces [-> metadata]*``
- content: ``content [-> class|metadata]*``
- class: ``class [-> dst_name]* -> element_content [-> field|method|comment]*``
- field: ``field [-> dst_name|dst_desc]* -> element_content [-> comment]``
- method: ``method [-> dst_name|dst_desc]* -> element_content [-> arg|var|comment]*``
- arg: ``method_arg [-> dst_name]* -> element_content [-> comment]``
- var: ``method_var [-> dst_name]* -> element_content [-> comment]``

Callbacks returning ``bool`` skip the remainder of their item when they return
``False``: skipping in ``visit_class`` suppresses its destination names, its
element content and its members, and the producer continues with the next
class or ``visit_end``.

``visit_end`` returning ``False`` requests another complete pass with the same
namespaces and data. This is only allowed for visitors declaring
:attr:`MappingFlag.NEEDS_MULTIPLE_PASSES`. An unrelated visitation starts
after :meth:`MappingVisitor.reset`.
"""

import logging
from abc import abstractmethod
from collections.abc import Sequence
from typing import Protocol

from jvm_mappings.flags import MappingFlag
from jvm_mappings.kinds import MappedElementKind

logger = logging.getLogger(__name__)


class MappingError(RuntimeError):
    """Represent any failure raised while visiting mappings."""


class VisitorContractError(MappingError):
    """Represent a producer/consumer contract violation."""


class MissingDescriptorError(VisitorContractError):
    """Represent a descriptor required by a visitor flag but not supplied."""


class DuplicateElementError(VisitorContractError):
    """Represent a repeated element visit while uniqueness is required."""


class ProtocolStateError(VisitorContractError):
    """Represent a callback invoked out of visitation order."""


class MappingWriteError(MappingError):
    """Represent a failure of the output sink of a writer."""


class MappingVisitor(Protocol):
    """Visitor with order-implied context and consecutive dst name visits.

    Subclass explicitly to inherit the default implementations of the optional
    callbacks.
    """

    @abstractmethod
    def flags(self) -> frozenset[MappingFlag]:
        """Return the flags describing this visitor's requirements."""

    def reset(self) -> None:
        """Reset this visitor and any chained visitors for an independent visit."""

    def visit_header(self) -> bool:
        """Determine whether the header (namespaces, header metadata) is visited."""
        return True

    @abstractmethod
    def visit_namespaces(
        self, src_namespace: str, dst_namespaces: Sequence[str]
    ) -> None:
        """Visit the list of namespaces.

        Args:
            src_namespace: Source namespace name.
            dst_namespaces: Destination namespace names, possibly empty for a
                single-namespace mapping.
        """

    def visit_metadata(self, key: str, value: str | None) -> None:
        """Visit a metadata property.

        Args:
            key: Property key.
            value: Property value, ``None`` for a bare key.
        """

    def visit_content(self) -> bool:
        """Determine whether the mapping content is visited."""
        return True

    @abstractmethod
    def visit_class(self, src_name: str) -> bool:
        """Visit a class by source name.

        Returns:
            True when destination names, members and comments should follow.
        """

    @abstractmethod
    def visit_field(self, src_name: str, src_desc: str | None) -> bool:
        """Visit a field by source name and descriptor.

        Returns:
            True when destination names and the comment should follow.
        """

    @abstractmethod
    def visit_method(self, src_name: str, src_desc: str | None) -> bool:
        """Visit a method by source name and descriptor.

        Returns:
            True when destination names, args, vars and the comment should follow.
        """

    @abstractmethod
    def visit_method_arg(
        self, arg_position: int, lv_index: int, src_name: str | None
    ) -> bool:
        """Visit a method argument.

        Args:
            arg_position: Zero-based position in the method signature, -1 if unknown.
            lv_index: Local variable slot, -1 if unknown.
            src_name: Source name if known.

        Returns:
            True when destination names and the comment should follow.
        """

    @abstractmethod
    def visit_method_var(
        self,
        lvt_row_index: int,
        lv_index: int,
        start_op_idx: int,
        src_name: str | None,
    ) -> bool:
        """Visit a method local variable.

        Args:
            lvt_row_index: Row in the local variable table, -1 if unknown.
            lv_index: Local variable slot.
            start_op_idx: Bytecode offset where the variable becomes live.
            src_name: Source name if known.

        Returns:
            True when destination names and the comment should follow.
        """

    def visit_end(self) -> bool:
        """Finish the visitation pass.

        Returns:
            True if the pass is final, False to request another pass.
        """
        return True

    @abstractmethod
    def visit_dst_name(
        self, target_kind: MappedElementKind, namespace: int, name: str
    ) -> None:
        """Visit a destination name of the current element.

        Args:
            target_kind: Kind of the element being named.
            namespace: Index into the destination namespaces.
            name: Destination name.
        """

    def visit_dst_desc(
        self, target_kind: MappedElementKind, namespace: int, desc: str
    ) -> None:
        """Visit a destination descriptor of the current field or method."""

    @abstractmethod
    def visit_element_content(self, target_kind: MappedElementKind) -> bool:
        """Notify that all destination data of the current element arrived.

        Called after the element itself and its destination names and
        descriptors, before its children and comment.

        Returns:
            True when the children and comment should follow.
        """

    @abstractmethod
    def visit_comment(self, target_kind: MappedElementKind, comment: str) -> None:
        """Visit the comment of the last content-visited element or one of its parents.

        Args:
            target_kind: Kind of the commented element.
            comment: Comment text, possibly spanning several lines.
        """


def require_final_pass(visitor: MappingVisitor, final: bool) -> bool:
    """Validate a ``visit_end`` result against the visitor's flags.

    Args:
        visitor: Visitor that returned ``final``.
        final: Value returned by ``visit_end``.

    Returns:
        ``final`` unchanged.

    Raises:
        VisitorContractError: If another pass was requested without
            :attr:`MappingFlag.NEEDS_MULTIPLE_PASSES`.
    """
    if final:
        return True
    if MappingFlag.NEEDS_MULTIPLE_PASSES in visitor.flags():
        return False
    logger.warning(
        "Visitor requested another pass without declaring it (visitor=%s)",
        type(visitor).__name__,
    )
    raise VisitorContractError(
        f"{type(visitor).__name__} requested another pass without "
        "NEEDS_MULTIPLE_PASSES"
    )
