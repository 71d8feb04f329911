"""Syntax tree nodes produced by the template grammar."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Optional, Union

_U64_LIMIT = 1 << 64


class NodeType(enum.IntEnum):
    """Kinds of node in a template document tree."""

    U64 = 0
    STRING = 1
    DOCUMENT = 2
    INCLUDE = 3
    TEMPLATE = 4
    TEMPLATE_CHUNK_LIST = 5
    TEMPLATE_CHUNK_TEXT = 6
    TEMPLATE_CHUNK_EXPR = 7
    TEMPLATE_EXPR_ID = 8
    TEMPLATE_EXPR_DOT = 9
    TEMPLATE_EXPR_PLUS = 10
    TEMPLATE_EXPR_PERCENT = 11
    FIELD = 12
    FIELD_BODY_LIST = 13
    FIELD_BODY_ITEM_TEXT = 14
    FIELD_BODY_ITEM_GENERATOR = 15
    CONTEXT = 16


class AstNode:
    """A node of the document tree, optionally carrying a string or integer."""

    __slots__ = ("type", "children", "_data")

    def __init__(self, node_type: NodeType, children: Optional[Iterable["AstNode"]] = None) -> None:
        self.type = NodeType(node_type)
        self.children: list[AstNode] = []
        self._data: Union[int, str, None] = None
        for child in children or ():
            self.add_child(child)

    def add_child(self, child: "AstNode") -> None:
        """Append a child node."""
        if child is None:
            raise ValueError("child node must not be None")
        if not isinstance(child, AstNode):
            raise TypeError(f"child must be an AstNode, not {type(child).__name__}")
        self.children.append(child)

    def set_data(self, data: Union[int, str]) -> None:
        """Attach a value: a string to a STRING node, an unsigned 64-bit integer to a U64 node."""
        if isinstance(data, str):
            if self.type is not NodeType.STRING:
                raise TypeError(f"cannot store a string in a {self.type.name} node")
        elif isinstance(data, int) and not isinstance(data, bool):
            if self.type is not NodeType.U64:
                raise TypeError(f"cannot store an integer in a {self.type.name} node")
            if not 0 <= data < _U64_LIMIT:
                raise ValueError(f"integer {data} does not fit in 64 unsigned bits")
        else:
            raise TypeError(f"unsupported node data of type {type(data).__name__}")
        self._data = data

    @property
    def string(self) -> str:
        """The string carried by a STRING node."""
        if self.type is not NodeType.STRING:
            raise TypeError(f"{self.type.name} node carries no string")
        return self._data  # type: ignore[return-value]

    @property
    def integer(self) -> int:
        """The integer carried by a U64 node."""
        if self.type is not NodeType.U64:
            raise TypeError(f"{self.type.name} node carries no integer")
        return self._data  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self._data is not None:
            return f"AstNode({self.type.name}, {self._data!r})"
        return f"AstNode({self.type.name}, children={len(self.children)})"


def create_node(node_type: NodeType) -> AstNode:
    """Create an empty node of the given type."""
    return AstNode(node_type)


def create_node_u64(value: int) -> AstNode:
    """Create a U64 node holding ``value``."""
    node = AstNode(NodeType.U64)
    node.set_data(value)
    return node


def create_node_str(value: str) -> AstNode:
    """Create a STRING node holding ``value``."""
    node = AstNode(NodeType.STRING)
    node.set_data(value)
    return node