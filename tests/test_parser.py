import pytest

from insnfuzz.ast import AstNode, NodeType, create_node_str
from insnfuzz.parser import TemplateParser, TemplateStructureError
from insnfuzz.templates import (
    BackRefChunk,
    BinaryExpressionChunk,
    ExpressionKind,
    FieldChunk,
    StringChunk,
    ThisChunk,
)


def node(kind, *children):
    return AstNode(kind, children)


def field_stmt(name, *values):
    items = [node(NodeType.FIELD_BODY_ITEM_TEXT, create_node_str(v)) for v in values]
    return node(NodeType.FIELD, create_node_str(name), node(NodeType.FIELD_BODY_LIST, *items))


def text(value):
    return node(NodeType.TEMPLATE_CHUNK_TEXT, create_node_str(value))


def expr(inner):
    return node(NodeType.TEMPLATE_CHUNK_EXPR, inner)


def ident(name):
    return node(NodeType.TEMPLATE_EXPR_ID, create_node_str(name))


def template_stmt(*chunks):
    return node(NodeType.TEMPLATE, node(NodeType.TEMPLATE_CHUNK_LIST, *chunks))


def context_stmt(name):
    return node(NodeType.CONTEXT, create_node_str(name))


def document(*statements):
    return node(NodeType.DOCUMENT, *statements)


def test_field_and_template():
    parser = TemplateParser()
    parser.process_document(
        document(field_stmt("reg", "r0", "r1"), template_stmt(text("mov "), expr(ident("reg"))))
    )
    assert parser.fields.at("reg").values == ["r0", "r1"]
    assert len(parser.templates) == 1
    chunks = list(parser.templates[0])
    assert isinstance(chunks[0], StringChunk) and chunks[0].data == "mov "
    assert isinstance(chunks[1], FieldChunk)
    assert chunks[1].descriptor is parser.fields.at("reg")


def test_context_applies_to_following_templates():
    parser = TemplateParser()
    parser.process_document(
        document(
            template_stmt(text("a")),
            context_stmt("bdiv"),
            template_stmt(text("b")),
        )
    )
    assert [t.context for t in parser.templates] == ["", "bdiv"]


def test_undefined_field_raises():
    parser = TemplateParser()
    with pytest.raises(TemplateStructureError, match="Field 'nope' does not exist"):
        parser.process_document(document(template_stmt(expr(ident("nope")))))
    assert parser.templates == []


def test_back_reference_and_dot_and_plus():
    parser = TemplateParser()
    plus = node(
        NodeType.TEMPLATE_EXPR_PLUS,
        node(NodeType.TEMPLATE_EXPR_DOT),
        ident("imm"),
    )
    percent = node(NodeType.TEMPLATE_EXPR_PERCENT, create_node_str("1"))
    parser.process_document(
        document(
            field_stmt("imm", "#4"),
            template_stmt(text("b "), expr(ident("imm")), expr(plus), expr(percent)),
        )
    )
    template = parser.templates[0]
    expression = template.chunk_at(2)
    assert isinstance(expression, BinaryExpressionChunk)
    assert expression.kind is ExpressionKind.PLUS
    assert isinstance(expression.lhs, ThisChunk)
    assert isinstance(expression.rhs, FieldChunk)
    back = template.chunk_at(3)
    assert isinstance(back, BackRefChunk)
    assert back.ref is template.chunk_at(1)


def test_back_reference_out_of_range_raises():
    parser = TemplateParser()
    percent = node(NodeType.TEMPLATE_EXPR_PERCENT, create_node_str("3"))
    with pytest.raises(TemplateStructureError):
        parser.process_document(document(template_stmt(text("x"), expr(percent))))


def test_back_reference_non_numeric_raises():
    parser = TemplateParser()
    percent = node(NodeType.TEMPLATE_EXPR_PERCENT, create_node_str("abc"))
    with pytest.raises(TemplateStructureError):
        parser.process_document(document(template_stmt(text("x"), expr(percent))))


def test_generator_items_unimplemented():
    parser = TemplateParser()
    body = node(NodeType.FIELD_BODY_LIST, node(NodeType.FIELD_BODY_ITEM_GENERATOR))
    stmt = node(NodeType.FIELD, create_node_str("g"), body)
    with pytest.raises(TemplateStructureError, match="Unimplemented"):
        parser.process_document(document(stmt))


def test_unknown_statement_type_raises():
    parser = TemplateParser()
    with pytest.raises(TemplateStructureError, match=f"Unknown type: {int(NodeType.INCLUDE)}"):
        parser.process_document(document(node(NodeType.INCLUDE)))


def test_field_values_added_later_are_shared():
    parser = TemplateParser()
    parser.process_document(
        document(
            field_stmt("reg", "r0"),
            template_stmt(expr(ident("reg"))),
            field_stmt("reg", "r1"),
        )
    )
    chunk = parser.templates[0].chunk_at(0)
    assert chunk.descriptor.values == ["r0", "r1"]


def test_documents_accumulate():
    parser = TemplateParser()
    parser.process_document(document(template_stmt(text("a"))))
    parser.process_document(document(template_stmt(text("b"))))
    assert [t.chunk_at(0).data for t in parser.templates] == ["a", "b"]