# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Rich console helpers for logging setup and mapping summaries."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from jvm_mappings.tree import MemoryMappingTree

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def render_mapping_summary(tree: MemoryMappingTree, console: Console) -> int:
    """Print one table row per class of a mapping tree.

    Args:
        tree: Populated mapping tree.
        console: Rich console receiving the table.

    Returns:
        Number of class rows printed.
    """
    table = Table(title=f"Mappings ({tree.src_namespace or '?'})")
    table.add_column(tree.src_namespace or "source")
    for dst_namespace in tree.dst_namespaces:
        table.add_column(dst_namespace)
    table.add_column("fields", justify="right")
    table.add_column("methods", justify="right")

    rows = 0
    for class_entry in tree.classes:
        dst_names = [
            class_entry.dst_name(namespace) or ""
            for namespace in range(len(tree.dst_namespaces))
        ]
        table.add_row(
            class_entry.src_name or "",
            *dst_names,
            str(len(class_entry.fields)),
            str(len(class_entry.methods)),
        )
        rows += 1
    console.print(table)
    logger.debug("Rendered mapping summary (classes=%d)", rows)
    return rows
