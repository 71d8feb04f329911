"""Builds templates and fields from a parsed template document tree."""

from __future__ import annotations

import re

from .ast import AstNode, NodeType
from .templates import (
    BackRefChunk,
    BinaryExpressionChunk,
    ExpressionKind,
    FieldChunk,
    FieldDescriptor,
    FieldDescriptorCollection,
    StringChunk,
    Template,
    TemplateChunk,
    TemplateCollection,
    ThisChunk,
)

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


class TemplateStructureError(Exception):
    """A document tree does not have the shape the template language requires."""


def _child(node: AstNode, index: int) -> AstNode:
    try:
        return node.children[index]
    except IndexError:
        raise TemplateStructureError(
            f"{node.type.name} node has no child {index}"
        ) from None


def _parse_index(text: str) -> int:
    match = _LEADING_INTEGER.match(text)
    if match is None:
        raise TemplateStructureError(f"Invalid back-reference index '{text}'")
    return int(match.group(1))


class TemplateParser:
    """Collects templates and field descriptors from document trees."""

    def __init__(self) -> None:
        self.templates: TemplateCollection = []
        self.fields = FieldDescriptorCollection()
        self.context = ""

    def process_document(self, doc: AstNode) -> None:
        """Visit every statement of a document in order."""
        for statement in doc.children:
            if statement.type is NodeType.TEMPLATE:
                self._visit_template(statement)
            elif statement.type is NodeType.FIELD:
                self._visit_field(statement)
            elif statement.type is NodeType.CONTEXT:
                self.context = _child(statement, 0).string
            else:
                raise TemplateStructureError(f"Unknown type: {int(statement.type)}")

    def _visit_template(self, node: AstNode) -> None:
        template = Template(context=self.context)
        for child in node.children:
            if child.type is not NodeType.TEMPLATE_CHUNK_LIST:
                raise TemplateStructureError(
                    f"Unexpected {child.type.name} node in template"
                )
            self._visit_chunk_list(child, template)
        self.templates.append(template)

    def _visit_chunk_list(self, node: AstNode, template: Template) -> None:
        for child in node.children:
            if child.type is NodeType.TEMPLATE_CHUNK_TEXT:
                template.add_chunk(StringChunk(_child(child, 0).string))
            elif child.type is NodeType.TEMPLATE_CHUNK_EXPR:
                template.add_chunk(self._visit_expression(_child(child, 0), template))
            else:
                raise TemplateStructureError(
                    f"Unexpected {child.type.name} node in chunk list"
                )

    def _visit_expression(self, node: AstNode, template: Template) -> TemplateChunk:
        if node.type is NodeType.TEMPLATE_EXPR_ID:
            name = _child(node, 0).string
            if name not in self.fields:
                raise TemplateStructureError(f"Field '{name}' does not exist")
            return FieldChunk(self.fields.at(name))
        if node.type is NodeType.TEMPLATE_EXPR_DOT:
            return ThisChunk()
        if node.type is NodeType.TEMPLATE_EXPR_PLUS:
            return BinaryExpressionChunk(
                ExpressionKind.PLUS,
                self._visit_expression(_child(node, 0), template),
                self._visit_expression(_child(node, 1), template),
            )
        if node.type is NodeType.TEMPLATE_EXPR_PERCENT:
            index = _parse_index(_child(node, 0).string)
            try:
                return BackRefChunk(template.chunk_at(index))
            except IndexError as exc:
                raise TemplateStructureError(str(exc)) from None
        raise TemplateStructureError("Unsupported field expression node")

    def _visit_field(self, node: AstNode) -> None:
        descriptor = self.fields[_child(node, 0).string]
        self._visit_field_body(_child(node, 1), descriptor)

    @staticmethod
    def _visit_field_body(node: AstNode, descriptor: FieldDescriptor) -> None:
        for item in node.children:
            if item.type is NodeType.FIELD_BODY_ITEM_TEXT:
                descriptor.add_value(_child(item, 0).string)
            elif item.type is NodeType.FIELD_BODY_ITEM_GENERATOR:
                raise TemplateStructureError("Unimplemented")
            else:
                raise TemplateStructureError(
                    f"Unexpected {item.type.name} node in field body"
                )