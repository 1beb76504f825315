# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Tiny v2 mapping writer."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TextIO

from jvm_mappings.flags import MappingFlag
from jvm_mappings.kinds import MappedElementKind
from jvm_mappings.visitor import (
    MappingVisitor,
    MappingWriteError,
    MissingDescriptorError,
    ProtocolStateError,
)

logger = logging.getLogger(__name__)

ESCAPED_NAMES_PROPERTY = "escaped-names"

_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


@dataclass(frozen=True)
class Tiny2WriterOptions:
    """Configure Tiny v2 output.

    Attributes:
        escape_names: Escape names and announce it with the
            ``escaped-names`` header property.
    """

    escape_names: bool = False


class Tiny2Writer(MappingVisitor):
    """Write visited mappings to a text sink in the Tiny v2 layout."""

    def __init__(self, sink: TextIO, options: Tiny2WriterOptions | None = None) -> None:
        """Initialize writer state.

        Args:
            sink: Text stream receiving the output.
            options: Output options; defaults are used when omitted.
        """
        self._sink = sink
        self._options = options or Tiny2WriterOptions()
        self._dst_names: list[str | None] = []
        self._escape_names = self._options.escape_names
        self._wrote_escaped_names = False
        self._in_header = False

    def flags(self) -> frozenset[MappingFlag]:
        return frozenset(
            {
                MappingFlag.NEEDS_HEADER_METADATA,
                MappingFlag.NEEDS_UNIQUENESS,
                MappingFlag.NEEDS_SRC_FIELD_DESC,
                MappingFlag.NEEDS_SRC_METHOD_DESC,
            }
        )

    def reset(self) -> None:
        self._dst_names = []
        self._escape_names = self._options.escape_names
        self._wrote_escaped_names = False
        self._in_header = False

    def visit_namespaces(
        self, src_namespace: str, dst_namespaces: Sequence[str]
    ) -> None:
        self._dst_names = [None] * len(dst_namespaces)
        self._in_header = True
        self._write("tiny\tv2\t0\t")
        self._write(src_namespace)
        for dst_namespace in dst_namespaces:
            self._write("\t")
            self._write(dst_namespace)
        self._write("\n")
        if self._escape_names:
            self._write_escaped_names_property()

    def visit_metadata(self, key: str, value: str | None) -> None:
        if not self._in_header:
            logger.debug("Dropping content metadata (key=%s)", key)
            return
        if key == ESCAPED_NAMES_PROPERTY:
            self._escape_names = True
            if not self._wrote_escaped_names:
                self._write_escaped_names_property()
            return
        self._write("\t")
        self._write(key)
        if value is not None:
            self._write("\t")
            self._write(value)
        self._write("\n")

    def visit_content(self) -> bool:
        self._in_header = False
        return True

    def visit_class(self, src_name: str) -> bool:
        self._in_header = False
        self._write("c\t")
        self._write_name(src_name)
        return True

    def visit_field(self, src_name: str, src_desc: str | None) -> bool:
        self._write_member("f", src_name, src_desc)
        return True

    def visit_method(self, src_name: str, src_desc: str | None) -> bool:
        self._write_member("m", src_name, src_desc)
        return True

    def visit_method_arg(
        self, arg_position: int, lv_index: int, src_name: str | None
    ) -> bool:
        self._write(f"\t\tp\t{lv_index}\t")
        if src_name is not None:
            self._write_name(src_name)
        return True

    def visit_method_var(
        self,
        lvt_row_index: int,
        lv_index: int,
        start_op_idx: int,
        src_name: str | None,
    ) -> bool:
        self._write(f"\t\tv\t{lv_index}\t{start_op_idx}\t{max(lvt_row_index, -1)}\t")
        if src_name is not None:
            self._write_name(src_name)
        return True

    def visit_dst_name(
        self, target_kind: MappedElementKind, namespace: int, name: str
    ) -> None:
        if not 0 <= namespace < len(self._dst_names):
            logger.warning(
                "Destination namespace out of range (kind=%s namespace=%d)",
                target_kind.name,
                namespace,
            )
            raise ProtocolStateError(
                f"Destination namespace index {namespace} out of range"
            )
        self._dst_names[namespace] = name

    def visit_element_content(self, target_kind: MappedElementKind) -> bool:
        for dst_name in self._dst_names:
            self._write("\t")
            if dst_name is not None:
                self._write_name(dst_name)
        self._write("\n")
        self._dst_names = [None] * len(self._dst_names)
        return True

    def visit_comment(self, target_kind: MappedElementKind, comment: str) -> None:
        self._write("\t" * target_kind.level)
        self._write("\tc\t")
        self._write(escape(comment))
        self._write("\n")

    def _write_member(self, tag: str, src_name: str, src_desc: str | None) -> None:
        if src_desc is None:
            logger.warning(
                "Member visited without source descriptor (name=%s)", src_name
            )
            raise MissingDescriptorError(
                f"Tiny2Writer needs a source descriptor for {src_name}"
            )
        self._write(f"\t{tag}\t")
        self._write_name(src_desc)
        self._write("\t")
        self._write_name(src_name)

    def _write_escaped_names_property(self) -> None:
        self._write(f"\t{ESCAPED_NAMES_PROPERTY}\n")
        self._wrote_escaped_names = True

    def _write_name(self, name: str) -> None:
        self._write(escape(name) if self._escape_names else name)

    def _write(self, text: str) -> None:
        try:
            self._sink.write(text)
        except OSError as exc:
            logger.warning("Failed writing Tiny v2 output (error=%s)", exc)
            raise MappingWriteError(str(exc)) from exc


def escape(text: str) -> str:
    """Escape Tiny v2 control characters.

    Args:
        text: Raw text.

    Returns:
        Text with backslash, newline, carriage return, tab and NUL escaped.
    """
    if not any(char in _ESCAPES for char in text):
        return text
    return "".join(_ESCAPES.get(char, char) for char in text)
