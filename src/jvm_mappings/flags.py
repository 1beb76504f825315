# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Capability flags a mapping visitor declares to its producer."""

from enum import Enum


class MappingFlag(Enum):
    """Describe requirements a visitor imposes on whoever drives it.

    Members:
        NEEDS_MULTIPLE_PASSES: The visitor may return ``False`` from
            ``visit_end`` to request another identical pass.
        NEEDS_HEADER_METADATA: Metadata has to be provided in the header.
        NEEDS_UNIQUENESS: An element is visited at most once per pass, so all
            members of a class follow its single ``visit_class`` call.
        NEEDS_SRC_FIELD_DESC: Source field descriptors have to be supplied.
        NEEDS_SRC_METHOD_DESC: Source method descriptors have to be supplied.
        NEEDS_DST_FIELD_DESC: Destination field descriptors have to be supplied.
        NEEDS_DST_METHOD_DESC: Destination method descriptors have to be supplied.
    """

    NEEDS_MULTIPLE_PASSES = "needs_multiple_passes"
    NEEDS_HEADER_METADATA = "needs_header_metadata"
    NEEDS_UNIQUENESS = "needs_uniqueness"
    NEEDS_SRC_FIELD_DESC = "needs_src_field_desc"
    NEEDS_SRC_METHOD_DESC = "needs_src_method_desc"
    NEEDS_DST_FIELD_DESC = "needs_dst_field_desc"
    NEEDS_DST_METHOD_DESC = "needs_dst_method_desc"


NO_FLAGS: frozenset[MappingFlag] = frozenset()
