# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for element kinds, flags and the visitor base classes."""

import io

import pytest

from jvm_mappings import (
    ForwardingMappingVisitor,
    MappedElementKind,
    MappingFlag,
    MemoryMappingTree,
    Tiny2Writer,
    VisitorContractError,
)
from jvm_mappings.visitor import MappingVisitor, require_final_pass

CLASS = MappedElementKind.CLASS
FIELD = MappedElementKind.FIELD


class _UppercaseClasses(ForwardingMappingVisitor):
    def visit_dst_name(
        self, target_kind: MappedElementKind, namespace: int, name: str
    ) -> None:
        if target_kind is MappedElementKind.CLASS:
            name = name.upper()
        super().visit_dst_name(target_kind, namespace, name)


class _DropFields(ForwardingMappingVisitor):
    def visit_field(self, src_name: str, src_desc: str | None) -> bool:
        return False


@pytest.mark.parametrize(
    ("kind", "level"),
    [
        (MappedElementKind.CLASS, 0),
        (MappedElementKind.FIELD, 1),
        (MappedElementKind.METHOD, 1),
        (MappedElementKind.METHOD_ARG, 2),
        (MappedElementKind.METHOD_VAR, 2),
    ],
)
def test_proto_001_element_kind_levels(kind: MappedElementKind, level: int) -> None:
    assert kind.level == level


def test_proto_002_flag_sets_have_no_order_or_duplicates() -> None:
    flags = frozenset(
        [
            MappingFlag.NEEDS_UNIQUENESS,
            MappingFlag.NEEDS_SRC_FIELD_DESC,
            MappingFlag.NEEDS_UNIQUENESS,
        ]
    )

    assert flags == {MappingFlag.NEEDS_SRC_FIELD_DESC, MappingFlag.NEEDS_UNIQUENESS}
    assert len(MappingFlag) == 7


def test_proto_003_optional_callbacks_have_defaults() -> None:
    tree = MemoryMappingTree()

    assert tree.visit_header() is True
    assert MappingVisitor.visit_content(tree) is True
    assert MappingVisitor.visit_end(tree) is True
    assert MappingVisitor.visit_dst_desc(tree, FIELD, 0, "I") is None


def test_proto_004_visitor_without_required_callbacks_cannot_be_built() -> None:
    class _Incomplete(MappingVisitor):
        def flags(self) -> frozenset[MappingFlag]:
            return frozenset()

    with pytest.raises(TypeError):
        _Incomplete()


def test_proto_005_final_pass_requires_multi_pass_flag(make_recorder) -> None:
    plain = make_recorder()
    multi = make_recorder(flags=frozenset({MappingFlag.NEEDS_MULTIPLE_PASSES}))

    assert require_final_pass(plain, True) is True
    assert require_final_pass(multi, False) is False
    with pytest.raises(VisitorContractError):
        require_final_pass(plain, False)


def test_proto_006_forwarding_visitor_rewrites_and_forwards() -> None:
    tree = MemoryMappingTree()
    tree.visit_namespaces("named", ["intermediary"])
    tree.visit_class("a")
    tree.visit_dst_name(CLASS, 0, "b")
    tree.visit_field("f", "I")
    tree.visit_dst_name(FIELD, 0, "g")
    sink = io.StringIO()

    tree.accept(_UppercaseClasses(Tiny2Writer(sink)))

    assert sink.getvalue() == "tiny\tv2\t0\tnamed\tintermediary\nc\ta\tB\n\tf\tI\tf\tg\n"


def test_proto_007_forwarding_skip_prunes_downstream(make_recorder) -> None:
    tree = MemoryMappingTree()
    tree.visit_namespaces("named", [])
    tree.visit_class("a")
    tree.visit_field("f", "I")
    tree.visit_comment(FIELD, "hidden")
    tree.visit_method("m", "()V")
    recorder = make_recorder()

    tree.accept(_DropFields(recorder))

    kinds = [event[0] for event in recorder.events]
    assert "field" not in kinds
    assert "comment" not in kinds
    assert ("method", "m", "()V") in recorder.events


def test_proto_008_forwarding_passes_flags_and_reset(make_recorder) -> None:
    recorder = make_recorder(flags=frozenset({MappingFlag.NEEDS_HEADER_METADATA}))
    chain = _DropFields(_UppercaseClasses(recorder))

    chain.reset()

    assert chain.flags() == {MappingFlag.NEEDS_HEADER_METADATA}
    assert recorder.resets == 1
