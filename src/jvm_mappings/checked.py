# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Chain link validating visitation order and the next visitor's flags."""

import logging
from collections.abc import Hashable, Sequence
from typing import Literal

from jvm_mappings.flags import MappingFlag
from jvm_mappings.forwarding import ForwardingMappingVisitor
from jvm_mappings.kinds import MappedElementKind
from jvm_mappings.visitor import (
    DuplicateElementError,
    MappingVisitor,
    MissingDescriptorError,
    ProtocolStateError,
    VisitorContractError,
    require_final_pass,
)

logger = logging.getLogger(__name__)

Section = Literal[
    "start",
    "header",
    "header_skipped",
    "header_done",
    "content",
    "content_done",
    "ended",
]

_MEMBER_KINDS = (MappedElementKind.FIELD, MappedElementKind.METHOD)
_SRC_DESC_FLAGS: dict[MappedElementKind, MappingFlag] = {
    MappedElementKind.FIELD: MappingFlag.NEEDS_SRC_FIELD_DESC,
    MappedElementKind.METHOD: MappingFlag.NEEDS_SRC_METHOD_DESC,
}
_DST_DESC_FLAGS: dict[MappedElementKind, MappingFlag] = {
    MappedElementKind.FIELD: MappingFlag.NEEDS_DST_FIELD_DESC,
    MappedElementKind.METHOD: MappingFlag.NEEDS_DST_METHOD_DESC,
}


class ContractCheckingVisitor(ForwardingMappingVisitor):
    """Reject callbacks that break visitation order or the next visitor's flags.

    Every callback is validated before it is forwarded, so the next visitor
    never observes an invalid sequence. Elements skipped by the next visitor
    close their subtree; children arriving anyway are rejected.
    """

    def __init__(self, next_visitor: MappingVisitor) -> None:
        """Initialize checker state.

        Args:
            next_visitor: Visitor receiving validated callbacks.
        """
        super().__init__(next_visitor)
        self._first_namespaces: tuple[str, tuple[str, ...]] | None = None
        self._start_pass()

    def reset(self) -> None:
        self._first_namespaces = None
        self._start_pass()
        super().reset()

    def visit_header(self) -> bool:
        self._expect_section("start")
        self._section = "header"
        if not super().visit_header():
            self._section = "header_skipped"
            return False
        return True

    def visit_namespaces(
        self, src_namespace: str, dst_namespaces: Sequence[str]
    ) -> None:
        self._expect_section("start", "header")
        namespaces = (src_namespace, tuple(dst_namespaces))
        if self._first_namespaces is None:
            self._first_namespaces = namespaces
        elif self._first_namespaces != namespaces:
            logger.warning(
                "Namespaces changed between passes (expected=%s actual=%s)",
                self._first_namespaces,
                namespaces,
            )
            raise VisitorContractError(
                "Repeated passes must visit the same namespaces"
            )
        self._dst_namespace_count = len(dst_namespaces)
        self._section = "header_done"
        super().visit_namespaces(src_namespace, dst_namespaces)

    def visit_metadata(self, key: str, value: str | None) -> None:
        self._expect_section("header_done", "content")
        self._expect_no_pending("visit_metadata")
        super().visit_metadata(key, value)

    def visit_content(self) -> bool:
        self._expect_section("start", "header", "header_skipped", "header_done")
        self._section = "content"
        if not super().visit_content():
            self._section = "content_done"
            return False
        return True

    def visit_class(self, src_name: str) -> bool:
        self._expect_section("content")
        self._expect_no_pending("visit_class")
        self._open = []
        self._class_key = src_name
        self._check_unique((MappedElementKind.CLASS, src_name))
        return self._begin(MappedElementKind.CLASS, super().visit_class(src_name))

    def visit_field(self, src_name: str, src_desc: str | None) -> bool:
        self._begin_member(MappedElementKind.FIELD, src_name, src_desc)
        return self._begin(
            MappedElementKind.FIELD, super().visit_field(src_name, src_desc)
        )

    def visit_method(self, src_name: str, src_desc: str | None) -> bool:
        self._begin_member(MappedElementKind.METHOD, src_name, src_desc)
        return self._begin(
            MappedElementKind.METHOD, super().visit_method(src_name, src_desc)
        )

    def visit_method_arg(
        self, arg_position: int, lv_index: int, src_name: str | None
    ) -> bool:
        self._begin_method_child(
            MappedElementKind.METHOD_ARG, (arg_position, lv_index)
        )
        return self._begin(
            MappedElementKind.METHOD_ARG,
            super().visit_method_arg(arg_position, lv_index, src_name),
        )

    def visit_method_var(
        self,
        lvt_row_index: int,
        lv_index: int,
        start_op_idx: int,
        src_name: str | None,
    ) -> bool:
        self._begin_method_child(
            MappedElementKind.METHOD_VAR, (lvt_row_index, lv_index, start_op_idx)
        )
        return self._begin(
            MappedElementKind.METHOD_VAR,
            super().visit_method_var(lvt_row_index, lv_index, start_op_idx, src_name),
        )

    def visit_dst_name(
        self, target_kind: MappedElementKind, namespace: int, name: str
    ) -> None:
        self._expect_pending(target_kind, "visit_dst_name")
        self._expect_namespace(namespace)
        super().visit_dst_name(target_kind, namespace, name)

    def visit_dst_desc(
        self, target_kind: MappedElementKind, namespace: int, desc: str
    ) -> None:
        self._expect_pending(target_kind, "visit_dst_desc")
        if target_kind not in _MEMBER_KINDS:
            self._fail(f"visit_dst_desc is not allowed for {target_kind.name}")
        self._expect_namespace(namespace)
        self._dst_descs.add(namespace)
        super().visit_dst_desc(target_kind, namespace, desc)

    def visit_element_content(self, target_kind: MappedElementKind) -> bool:
        self._expect_pending(target_kind, "visit_element_content")
        dst_desc_flag = _DST_DESC_FLAGS.get(target_kind)
        dst_count = self._dst_namespace_count or 0
        if dst_desc_flag is not None and dst_desc_flag in self.flags():
            missing = set(range(dst_count)) - self._dst_descs
            if missing:
                logger.warning(
                    "Destination descriptors missing (kind=%s namespaces=%s)",
                    target_kind.name,
                    sorted(missing),
                )
                raise MissingDescriptorError(
                    f"{target_kind.name} lacks destination descriptors for "
                    f"namespaces {sorted(missing)}"
                )
        self._pending = None
        if not super().visit_element_content(target_kind):
            return False
        self._open.append(target_kind)
        return True

    def visit_comment(self, target_kind: MappedElementKind, comment: str) -> None:
        self._expect_section("content")
        self._expect_no_pending("visit_comment")
        if target_kind not in self._open:
            self._fail(f"visit_comment for {target_kind.name} without open element")
        super().visit_comment(target_kind, comment)

    def visit_end(self) -> bool:
        if self._section in ("start", "ended"):
            self._fail(f"visit_end in section {self._section}")
        self._expect_no_pending("visit_end")
        final = require_final_pass(self.next_visitor, super().visit_end())
        if final:
            self._section = "ended"
        else:
            logger.debug("Next visitor requested another pass")
            self._start_pass()
        return final

    def _start_pass(self) -> None:
        self._section: Section = "start"
        self._dst_namespace_count: int | None = None
        self._pending: MappedElementKind | None = None
        self._open: list[MappedElementKind] = []
        self._dst_descs: set[int] = set()
        self._seen: set[Hashable] = set()
        self._class_key: str | None = None
        self._member_key: Hashable = None

    def _begin(self, kind: MappedElementKind, result: bool) -> bool:
        if result:
            self._pending = kind
        return result

    def _begin_member(
        self, kind: MappedElementKind, src_name: str, src_desc: str | None
    ) -> None:
        self._expect_section("content")
        self._expect_no_pending(f"visit_{kind.value}")
        if self._open[:1] != [MappedElementKind.CLASS]:
            self._fail(f"{kind.name} visited outside of a class")
        self._open = [MappedElementKind.CLASS]
        if src_desc is None and _SRC_DESC_FLAGS[kind] in self.flags():
            logger.warning(
                "Source descriptor missing (kind=%s name=%s)", kind.name, src_name
            )
            raise MissingDescriptorError(
                f"{kind.name} {src_name} requires a source descriptor"
            )
        self._member_key = (self._class_key, kind, src_name, src_desc)
        self._check_unique(self._member_key)
        self._dst_descs = set()

    def _begin_method_child(
        self, kind: MappedElementKind, key: tuple[int, ...]
    ) -> None:
        self._expect_section("content")
        self._expect_no_pending(f"visit_{kind.value}")
        if self._open[:2] != [MappedElementKind.CLASS, MappedElementKind.METHOD]:
            self._fail(f"{kind.name} visited outside of a method")
        self._open = [MappedElementKind.CLASS, MappedElementKind.METHOD]
        self._check_unique((self._member_key, kind, key))

    def _check_unique(self, key: Hashable) -> None:
        if MappingFlag.NEEDS_UNIQUENESS not in self.flags():
            return
        if key in self._seen:
            logger.warning("Duplicate element visit (key=%s)", key)
            raise DuplicateElementError(f"Element visited twice in one pass: {key}")
        self._seen.add(key)

    def _expect_section(self, *sections: Section) -> None:
        if self._section not in sections:
            self._fail(
                f"Expected section {'/'.join(sections)}, found {self._section}"
            )

    def _expect_no_pending(self, callback: str) -> None:
        if self._pending is not None:
            self._fail(
                f"{callback} before visit_element_content of {self._pending.name}"
            )

    def _expect_pending(self, kind: MappedElementKind, callback: str) -> None:
        if self._pending is not kind:
            pending = self._pending.name if self._pending else "nothing"
            self._fail(f"{callback} for {kind.name} while {pending} is pending")

    def _expect_namespace(self, namespace: int) -> None:
        if self._dst_namespace_count is None:
            return
        if not 0 <= namespace < self._dst_namespace_count:
            self._fail(f"Destination namespace index {namespace} out of range")

    def _fail(self, message: str) -> None:
        logger.warning("Visitation order violated (error=%s)", message)
        raise ProtocolStateError(message)
