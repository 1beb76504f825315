# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Mapping format writers."""

from jvm_mappings.format.tiny2 import Tiny2Writer, Tiny2WriterOptions

__all__ = ["Tiny2Writer", "Tiny2WriterOptions"]
