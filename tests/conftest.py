import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()

from jvm_mappings.flags import NO_FLAGS, MappingFlag  # noqa: E402
from jvm_mappings.kinds import MappedElementKind  # noqa: E402
from jvm_mappings.visitor import MappingVisitor  # noqa: E402


class RecordingVisitor(MappingVisitor):
    """Record every callback as a tuple and answer with configured results."""

    def __init__(
        self,
        flags: frozenset[MappingFlag] = NO_FLAGS,
        skip_classes: frozenset[str] = frozenset(),
        skip_content_of: frozenset[MappedElementKind] = frozenset(),
        extra_passes: int = 0,
        skip_header: bool = False,
        skip_content: bool = False,
    ) -> None:
        self._flags = flags
        self._skip_classes = skip_classes
        self._skip_content_of = skip_content_of
        self._extra_passes = extra_passes
        self._skip_header = skip_header
        self._skip_content = skip_content
        self.events: list[tuple] = []
        self.resets = 0

    def flags(self) -> frozenset[MappingFlag]:
        return self._flags

    def reset(self) -> None:
        self.resets += 1

    def visit_header(self) -> bool:
        self.events.append(("header",))
        return not self._skip_header

    def visit_namespaces(
        self, src_namespace: str, dst_namespaces: Sequence[str]
    ) -> None:
        self.events.append(("namespaces", src_namespace, tuple(dst_namespaces)))

    def visit_metadata(self, key: str, value: str | None) -> None:
        self.events.append(("metadata", key, value))

    def visit_content(self) -> bool:
        self.events.append(("content",))
        return not self._skip_content

    def visit_class(self, src_name: str) -> bool:
        self.events.append(("class", src_name))
        return src_name not in self._skip_classes

    def visit_field(self, src_name: str, src_desc: str | None) -> bool:
        self.events.append(("field", src_name, src_desc))
        return True

    def visit_method(self, src_name: str, src_desc: str | None) -> bool:
        self.events.append(("method", src_name, src_desc))
        return True

    def visit_method_arg(
        self, arg_position: int, lv_index: int, src_name: str | None
    ) -> bool:
        self.events.append(("arg", arg_position, lv_index, src_name))
        return True

    def visit_method_var(
        self,
        lvt_row_index: int,
        lv_index: int,
        start_op_idx: int,
        src_name: str | None,
    ) -> bool:
        self.events.append(("var", lvt_row_index, lv_index, start_op_idx, src_name))
        return True

    def visit_end(self) -> bool:
        self.events.append(("end",))
        if self._extra_passes > 0:
            self._extra_passes -= 1
            return False
        return True

    def visit_dst_name(
        self, target_kind: MappedElementKind, namespace: int, name: str
    ) -> None:
        self.events.append(("dst_name", target_kind, namespace, name))

    def visit_dst_desc(
        self, target_kind: MappedElementKind, namespace: int, desc: str
    ) -> None:
        self.events.append(("dst_desc", target_kind, namespace, desc))

    def visit_element_content(self, target_kind: MappedElementKind) -> bool:
        self.events.append(("element_content", target_kind))
        return target_kind not in self._skip_content_of

    def visit_comment(self, target_kind: MappedElementKind, comment: str) -> None:
        self.events.append(("comment", target_kind, comment))


@pytest.fixture
def make_recorder() -> Callable[..., RecordingVisitor]:
    return RecordingVisitor
