# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Base class for visitors that sit in front of another visitor."""

from collections.abc import Sequence

from jvm_mappings.flags import MappingFlag
from jvm_mappings.kinds import MappedElementKind
from jvm_mappings.visitor import MappingVisitor


class ForwardingMappingVisitor(MappingVisitor):
    """Forward every callback to the next visitor in the chain.

    Subclasses override the callbacks they filter or rewrite and call
    ``super()`` for whatever should reach the next visitor.
    """

    def __init__(self, next_visitor: MappingVisitor) -> None:
        """Initialize the chain link.

        Args:
            next_visitor: Visitor receiving forwarded callbacks.
        """
        self.next_visitor = next_visitor

    def flags(self) -> frozenset[MappingFlag]:
        return self.next_visitor.flags()

    def reset(self) -> None:
        self.next_visitor.reset()

    def visit_header(self) -> bool:
        return self.next_visitor.visit_header()

    def visit_namespaces(
        self, src_namespace: str, dst_namespaces: Sequence[str]
    ) -> None:
        self.next_visitor.visit_namespaces(src_namespace, dst_namespaces)

    def visit_metadata(self, key: str, value: str | None) -> None:
        self.next_visitor.visit_metadata(key, value)

    def visit_content(self) -> bool:
        return self.next_visitor.visit_content()

    def visit_class(self, src_name: str) -> bool:
        return self.next_visitor.visit_class(src_name)

    def visit_field(self, src_name: str, src_desc: str | None) -> bool:
        return self.next_visitor.visit_field(src_name, src_desc)

    def visit_method(self, src_name: str, src_desc: str | None) -> bool:
        return self.next_visitor.visit_method(src_name, src_desc)

    def visit_method_arg(
        self, arg_position: int, lv_index: int, src_name: str | None
    ) -> bool:
        return self.next_visitor.visit_method_arg(arg_position, lv_index, src_name)

    def visit_method_var(
        self,
        lvt_row_index: int,
        lv_index: int,
        start_op_idx: int,
        src_name: str | None,
    ) -> bool:
        return self.next_visitor.visit_method_var(
            lvt_row_index, lv_index, start_op_idx, src_name
        )

    def visit_end(self) -> bool:
        return self.next_visitor.visit_end()

    def visit_dst_name(
        self, target_kind: MappedElementKind, namespace: int, name: str
    ) -> None:
        self.next_visitor.visit_dst_name(target_kind, namespace, name)

    def visit_dst_desc(
        self, target_kind: MappedElementKind, namespace: int, desc: str
    ) -> None:
        self.next_visitor.visit_dst_desc(target_kind, namespace, desc)

    def visit_element_content(self, target_kind: MappedElementKind) -> bool:
        return self.next_visitor.visit_element_content(target_kind)

    def visit_comment(self, target_kind: MappedElementKind, comment: str) -> None:
        self.next_visitor.visit_comment(target_kind, comment)
