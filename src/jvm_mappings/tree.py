# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""In-memory mapping tree that records visits and replays them."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from jvm_mappings.flags import NO_FLAGS, MappingFlag
from jvm_mappings.kinds import MappedElementKind
from jvm_mappings.visitor import (
    MappingVisitor,
    MissingDescriptorError,
    ProtocolStateError,
    VisitorContractError,
    require_final_pass,
)

logger = logging.getLogger(__name__)

_Member = TypeVar("_Member", "FieldEntry", "MethodEntry")


@dataclass
class MappingEntry:
    """Hold the names and comment shared by every mapped element.

    Attributes:
        src_name: Source name; may be ``None`` for args and vars.
        dst_names: Destination names by namespace index, ``None`` when missing.
        comment: Element comment.
    """

    src_name: str | None
    dst_names: list[str | None] = field(default_factory=list)
    comment: str | None = None

    def dst_name(self, namespace: int) -> str | None:
        if namespace < len(self.dst_names):
            return self.dst_names[namespace]
        return None


@dataclass
class MethodArgEntry(MappingEntry):
    arg_position: int = -1
    lv_index: int = -1


@dataclass
class MethodVarEntry(MappingEntry):
    lvt_row_index: int = -1
    lv_index: int = -1
    start_op_idx: int = -1


@dataclass
class FieldEntry(MappingEntry):
    """Field mapping with source and destination descriptors."""

    src_desc: str | None = None
    dst_descs: list[str | None] = field(default_factory=list)


@dataclass
class MethodEntry(MappingEntry):
    """Method mapping with descriptors, arguments and local variables."""

    src_desc: str | None = None
    dst_descs: list[str | None] = field(default_factory=list)
    args: dict[tuple[int, int], MethodArgEntry] = field(default_factory=dict)
    vars: dict[tuple[int, int, int], MethodVarEntry] = field(default_factory=dict)


@dataclass
class ClassEntry(MappingEntry):
    """Class mapping with its fields and methods in visitation order."""

    fields: dict[tuple[str, str | None], FieldEntry] = field(default_factory=dict)
    methods: dict[tuple[str, str | None], MethodEntry] = field(default_factory=dict)

    def get_field(self, src_name: str, src_desc: str | None = None) -> FieldEntry | None:
        """Find a field by name, and by descriptor when one is given."""
        return _find_member(self.fields, src_name, src_desc)

    def get_method(
        self, src_name: str, src_desc: str | None = None
    ) -> MethodEntry | None:
        """Find a method by name, and by descriptor when one is given."""
        return _find_member(self.methods, src_name, src_desc)


class MemoryMappingTree(MappingVisitor):
    """Record visited mappings and replay them into other visitors.

    Repeated visits of the same element merge into one entry, so the tree
    accepts producers without uniqueness guarantees.
    """

    def __init__(self) -> None:
        """Initialize an empty tree."""
        self.src_namespace: str | None = None
        self.dst_namespaces: tuple[str, ...] = ()
        self.metadata: dict[str, str | None] = {}
        self.content_metadata: dict[str, str | None] = {}
        self._classes: dict[str, ClassEntry] = {}
        self._in_content = False
        self._current_class: ClassEntry | None = None
        self._current_member: FieldEntry | MethodEntry | None = None
        self._current_child: MethodArgEntry | MethodVarEntry | None = None

    @property
    def classes(self) -> list[ClassEntry]:
        return list(self._classes.values())

    def get_class(self, src_name: str) -> ClassEntry | None:
        return self._classes.get(src_name)

    def flags(self) -> frozenset[MappingFlag]:
        return NO_FLAGS

    def reset(self) -> None:
        self._in_content = False
        self._current_class = None
        self._current_member = None
        self._current_child = None

    def visit_namespaces(
        self, src_namespace: str, dst_namespaces: Sequence[str]
    ) -> None:
        namespaces = (src_namespace, tuple(dst_namespaces))
        if self._classes and namespaces != (self.src_namespace, self.dst_namespaces):
            logger.warning(
                "Namespace mismatch for populated tree (expected=%s actual=%s)",
                (self.src_namespace, self.dst_namespaces),
                namespaces,
            )
            raise VisitorContractError(
                "Cannot visit different namespaces into a populated tree"
            )
        self.src_namespace, self.dst_namespaces = namespaces

    def visit_metadata(self, key: str, value: str | None) -> None:
        target = self.content_metadata if self._in_content else self.metadata
        target[key] = value

    def visit_content(self) -> bool:
        self._in_content = True
        return True

    def visit_class(self, src_name: str) -> bool:
        self._in_content = True
        entry = self._classes.get(src_name)
        if entry is None:
            entry = ClassEntry(src_name=src_name)
            self._classes[src_name] = entry
        self._current_class = entry
        self._current_member = None
        self._current_child = None
        return True

    def visit_field(self, src_name: str, src_desc: str | None) -> bool:
        owner = self._require_class(MappedElementKind.FIELD)
        entry = owner.fields.get((src_name, src_desc))
        if entry is None:
            entry = FieldEntry(src_name=src_name, src_desc=src_desc)
            owner.fields[(src_name, src_desc)] = entry
        self._current_member = entry
        self._current_child = None
        return True

    def visit_method(self, src_name: str, src_desc: str | None) -> bool:
        owner = self._require_class(MappedElementKind.METHOD)
        entry = owner.methods.get((src_name, src_desc))
        if entry is None:
            entry = MethodEntry(src_name=src_name, src_desc=src_desc)
            owner.methods[(src_name, src_desc)] = entry
        self._current_member = entry
        self._current_child = None
        return True

    def visit_method_arg(
        self, arg_position: int, lv_index: int, src_name: str | None
    ) -> bool:
        owner = self._require_method(MappedElementKind.METHOD_ARG)
        key = (arg_position, lv_index)
        entry = owner.args.get(key)
        if entry is None:
            entry = MethodArgEntry(
                src_name=src_name, arg_position=arg_position, lv_index=lv_index
            )
            owner.args[key] = entry
        elif src_name is not None:
            entry.src_name = src_name
        self._current_child = entry
        return True

    def visit_method_var(
        self,
        lvt_row_index: int,
        lv_index: int,
        start_op_idx: int,
        src_name: str | None,
    ) -> bool:
        owner = self._require_method(MappedElementKind.METHOD_VAR)
        key = (lvt_row_index, lv_index, start_op_idx)
        entry = owner.vars.get(key)
        if entry is None:
            entry = MethodVarEntry(
                src_name=src_name,
                lvt_row_index=lvt_row_index,
                lv_index=lv_index,
                start_op_idx=start_op_idx,
            )
            owner.vars[key] = entry
        elif src_name is not None:
            entry.src_name = src_name
        self._current_child = entry
        return True

    def visit_end(self) -> bool:
        self.reset()
        return True

    def visit_dst_name(
        self, target_kind: MappedElementKind, namespace: int, name: str
    ) -> None:
        entry = self._entry_for(target_kind)
        _set_slot(entry.dst_names, namespace, name)

    def visit_dst_desc(
        self, target_kind: MappedElementKind, namespace: int, desc: str
    ) -> None:
        entry = self._entry_for(target_kind)
        if not isinstance(entry, (FieldEntry, MethodEntry)):
            raise ProtocolStateError(f"{target_kind.name} has no descriptor")
        _set_slot(entry.dst_descs, namespace, desc)

    def visit_element_content(self, target_kind: MappedElementKind) -> bool:
        return True

    def visit_comment(self, target_kind: MappedElementKind, comment: str) -> None:
        self._entry_for(target_kind).comment = comment

    def accept(self, visitor: MappingVisitor) -> int:
        """Replay the recorded mappings into a visitor.

        Args:
            visitor: Visitor to drive.

        Returns:
            Number of passes performed.

        Raises:
            VisitorContractError: If the tree has no namespaces or the visitor
                requests another pass without declaring it.
            MissingDescriptorError: If the visitor's flags demand descriptors
                the tree does not hold.
        """
        if self.src_namespace is None:
            raise VisitorContractError("Mapping tree has no namespaces")
        self._check_descriptors(visitor.flags())
        passes = 0
        while True:
            passes += 1
            if visitor.visit_header():
                visitor.visit_namespaces(self.src_namespace, self.dst_namespaces)
                for key, value in self.metadata.items():
                    visitor.visit_metadata(key, value)
            if visitor.visit_content():
                for key, value in self.content_metadata.items():
                    visitor.visit_metadata(key, value)
                for class_entry in self._classes.values():
                    _accept_class(visitor, class_entry)
            if require_final_pass(visitor, visitor.visit_end()):
                return passes
            logger.debug("Replaying mapping tree (pass=%d)", passes + 1)

    def _check_descriptors(self, flags: frozenset[MappingFlag]) -> None:
        dst_count = len(self.dst_namespaces)
        for class_entry in self._classes.values():
            checks: list[
                tuple[list[FieldEntry] | list[MethodEntry], str, MappingFlag, MappingFlag]
            ] = [
                (
                    list(class_entry.fields.values()),
                    "field",
                    MappingFlag.NEEDS_SRC_FIELD_DESC,
                    MappingFlag.NEEDS_DST_FIELD_DESC,
                ),
                (
                    list(class_entry.methods.values()),
                    "method",
                    MappingFlag.NEEDS_SRC_METHOD_DESC,
                    MappingFlag.NEEDS_DST_METHOD_DESC,
                ),
            ]
            for members, label, src_flag, dst_flag in checks:
                for member in members:
                    if src_flag in flags and member.src_desc is None:
                        logger.warning(
                            "Missing source descriptor (class=%s %s=%s)",
                            class_entry.src_name,
                            label,
                            member.src_name,
                        )
                        raise MissingDescriptorError(
                            f"Visitor requires a source descriptor for {label} "
                            f"{class_entry.src_name}.{member.src_name}"
                        )
                    if dst_flag in flags and any(
                        _slot(member.dst_descs, namespace) is None
                        for namespace in range(dst_count)
                    ):
                        logger.warning(
                            "Missing destination descriptor (class=%s %s=%s)",
                            class_entry.src_name,
                            label,
                            member.src_name,
                        )
                        raise MissingDescriptorError(
                            f"Visitor requires destination descriptors for {label} "
                            f"{class_entry.src_name}.{member.src_name}"
                        )

    def _require_class(self, kind: MappedElementKind) -> ClassEntry:
        if self._current_class is None:
            raise ProtocolStateError(f"{kind.name} visited outside of a class")
        return self._current_class

    def _require_method(self, kind: MappedElementKind) -> MethodEntry:
        if not isinstance(self._current_member, MethodEntry):
            raise ProtocolStateError(f"{kind.name} visited outside of a method")
        return self._current_member

    def _entry_for(self, kind: MappedElementKind) -> MappingEntry:
        entry: MappingEntry | None
        if kind is MappedElementKind.CLASS:
            entry = self._current_class
        elif kind is MappedElementKind.FIELD:
            entry = _as(self._current_member, FieldEntry)
        elif kind is MappedElementKind.METHOD:
            entry = _as(self._current_member, MethodEntry)
        elif kind is MappedElementKind.METHOD_ARG:
            entry = _as(self._current_child, MethodArgEntry)
        else:
            entry = _as(self._current_child, MethodVarEntry)
        if entry is None:
            raise ProtocolStateError(f"No current {kind.name} element")
        return entry


def _accept_class(visitor: MappingVisitor, entry: ClassEntry) -> None:
    if not visitor.visit_class(entry.src_name or ""):
        return
    if not _accept_element(visitor, MappedElementKind.CLASS, entry):
        return
    for field_entry in entry.fields.values():
        if visitor.visit_field(field_entry.src_name or "", field_entry.src_desc):
            _accept_element(
                visitor, MappedElementKind.FIELD, field_entry, field_entry.dst_descs
            )
    for method_entry in entry.methods.values():
        _accept_method(visitor, method_entry)


def _accept_method(visitor: MappingVisitor, entry: MethodEntry) -> None:
    if not visitor.visit_method(entry.src_name or "", entry.src_desc):
        return
    if not _accept_element(
        visitor, MappedElementKind.METHOD, entry, entry.dst_descs
    ):
        return
    for arg in entry.args.values():
        if visitor.visit_method_arg(arg.arg_position, arg.lv_index, arg.src_name):
            _accept_element(visitor, MappedElementKind.METHOD_ARG, arg)
    for var in entry.vars.values():
        if visitor.visit_method_var(
            var.lvt_row_index, var.lv_index, var.start_op_idx, var.src_name
        ):
            _accept_element(visitor, MappedElementKind.METHOD_VAR, var)


def _accept_element(
    visitor: MappingVisitor,
    kind: MappedElementKind,
    entry: MappingEntry,
    dst_descs: list[str | None] | None = None,
) -> bool:
    """Emit destination data, the content checkpoint and the comment.

    Returns:
        True when the visitor wants the element's children.
    """
    for namespace, name in enumerate(entry.dst_names):
        if name is not None:
            visitor.visit_dst_name(kind, namespace, name)
    for namespace, desc in enumerate(dst_descs or []):
        if desc is not None:
            visitor.visit_dst_desc(kind, namespace, desc)
    if not visitor.visit_element_content(kind):
        return False
    if entry.comment is not None:
        visitor.visit_comment(kind, entry.comment)
    return True


def _find_member(
    members: dict[tuple[str, str | None], _Member],
    src_name: str,
    src_desc: str | None,
) -> _Member | None:
    if src_desc is not None:
        return members.get((src_name, src_desc))
    for (name, _desc), member in members.items():
        if name == src_name:
            return member
    return None


def _as(entry: MappingEntry | None, entry_type: type) -> MappingEntry | None:
    return entry if isinstance(entry, entry_type) else None


def _slot(values: list[str | None], index: int) -> str | None:
    return values[index] if index < len(values) else None


def _set_slot(values: list[str | None], index: int, value: str) -> None:
    if index < 0:
        raise ProtocolStateError(f"Negative namespace index {index}")
    if index >= len(values):
        values.extend([None] * (index + 1 - len(values)))
    values[index] = value
