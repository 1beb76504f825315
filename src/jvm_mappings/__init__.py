# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for JVM obfuscation mappings."""

from jvm_mappings.checked import ContractCheckingVisitor
from jvm_mappings.descriptor import ClassName, Type
from jvm_mappings.flags import MappingFlag
from jvm_mappings.format.tiny2 import Tiny2Writer, Tiny2WriterOptions
from jvm_mappings.forwarding import ForwardingMappingVisitor
from jvm_mappings.kinds import MappedElementKind
from jvm_mappings.tree import MemoryMappingTree
from jvm_mappings.visitor import (
    DuplicateElementError,
    MappingError,
    MappingVisitor,
    MappingWriteError,
    MissingDescriptorError,
    ProtocolStateError,
    VisitorContractError,
)

__all__ = [
    "ClassName",
    "ContractCheckingVisitor",
    "DuplicateElementError",
    "ForwardingMappingVisitor",
    "MappedElementKind",
    "MappingError",
    "MappingFlag",
    "MappingVisitor",
    "MappingWriteError",
    "MemoryMappingTree",
    "MissingDescriptorError",
    "ProtocolStateError",
    "Tiny2Writer",
    "Tiny2WriterOptions",
    "Type",
    "VisitorContractError",
]
