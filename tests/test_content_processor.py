"""Tests for HTML text and AST extraction."""

from epub_extract.core.content_processor import (
    ContentProcessor,
    extract_text_content,
    get_stats,
    parse_html_ast,
)
from epub_extract.models.ast import CommentNode, ElementNode, TextNode, ast_adapter
from epub_extract.models.epub import Chapter


def _find(node: ElementNode, tag: str) -> ElementNode | None:
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, ElementNode):
            if current.tag == tag:
                return current
            stack.extend(reversed(current.children))
    return None


class TestTextExtraction:
    def test_single_paragraph(self):
        text = extract_text_content(b"<p>Hello world</p>")
        assert text == "Hello world"
        assert get_stats(text) == {"word_count": 2, "character_count": 11}

    def test_block_elements_break_lines(self):
        html = b"<div>One</div><h2>Two</h2><ul><li>Three</li><li>Four</li></ul>"
        assert extract_text_content(html) == "One\nTwo\nThree\nFour"

    def test_br_breaks_line(self):
        assert extract_text_content(b"<p>first<br/>second</p>") == "first\nsecond"

    def test_inline_elements_do_not_break(self):
        assert extract_text_content(b"<p>a <em>b</em> <span>c</span></p>") == "a b c"

    def test_blank_lines_are_dropped(self):
        html = b"<p>  </p><p>\n  kept  \n</p><div></div>"
        assert extract_text_content(html) == "kept"

    def test_comments_are_not_text(self):
        assert extract_text_content(b"<p>visible<!-- hidden --></p>") == "visible"

    def test_str_input(self):
        assert extract_text_content("<p>café</p>") == "café"

    def test_invalid_utf8_is_tolerated(self):
        text = extract_text_content(b"<p>bad \xff byte</p>")
        assert text.startswith("bad ")
        assert text.endswith(" byte")
        assert "�" in text

    def test_xhtml_with_declaration(self):
        html = (
            b'<?xml version="1.0" encoding="UTF-8"?>'
            b'<html xmlns="http://www.w3.org/1999/xhtml"><body><p>Body</p></body></html>'
        )
        assert extract_text_content(html) == "Body"

    def test_empty_document(self):
        assert extract_text_content(b"") == ""


class TestAst:
    def test_root_is_html_element(self):
        ast = parse_html_ast(b"<html><body><p>Hi</p></body></html>")
        assert isinstance(ast, ElementNode)
        assert ast.tag == "html"

    def test_structure_attrs_and_comments(self):
        ast = parse_html_ast(
            b'<html><body><p class="intro first" id="p1">Hi <b>there</b></p>'
            b"<!-- remark --></body></html>"
        )
        body = _find(ast, "body")
        assert body is not None

        p = body.children[0]
        assert isinstance(p, ElementNode)
        assert p.attrs == {"class": "intro first", "id": "p1"}
        assert p.children[0] == TextNode(content="Hi ")
        assert isinstance(p.children[1], ElementNode)
        assert p.children[1].tag == "b"
        assert p.children[1].children == [TextNode(content="there")]

        assert body.children[1] == CommentNode(content=" remark ")

    def test_adjacent_text_not_merged_across_comment(self):
        ast = parse_html_ast(b"<p>a<!--x-->b</p>")
        p = _find(ast, "p")
        assert [type(c) for c in p.children] == [TextNode, CommentNode, TextNode]

    def test_deep_nesting(self):
        depth = 200
        html = ("<div>" * depth + "deep" + "</div>" * depth).encode()
        ast = parse_html_ast(html)

        node = _find(ast, "div")
        levels = 0
        while isinstance(node, ElementNode) and node.tag == "div":
            levels += 1
            node = node.children[0]
        assert levels == depth
        assert node == TextNode(content="deep")

    def test_json_round_trip(self):
        ast = parse_html_ast(b'<p title="t">x<!--c--><i>y</i></p>')
        data = ast_adapter.dump_json(ast)
        restored = ast_adapter.validate_json(data)
        assert restored == ast
        assert b'"type":"element"' in data


class TestContentProcessor:
    def _chapter(self, content: bytes) -> Chapter:
        return Chapter(
            href="OEBPS/c1.xhtml",
            id="c1",
            media_type="application/xhtml+xml",
            content=content,
        )

    def test_text_only_has_no_ast(self):
        parsed = ContentProcessor.text_only().parse_chapter(self._chapter(b"<p>Hello world</p>"))
        assert parsed.content == "Hello world"
        assert parsed.ast is None
        assert parsed.word_count == 2
        assert parsed.char_count == 11
        assert parsed.chapter_info.id == "c1"

    def test_with_ast(self):
        parsed = ContentProcessor.with_ast().parse_chapter(self._chapter(b"<p>Hello world</p>"))
        assert parsed.content == "Hello world"
        assert isinstance(parsed.ast, ElementNode)
        assert _find(parsed.ast, "p").children == [TextNode(content="Hello world")]

    def test_with_both_builds_ast(self):
        assert ContentProcessor.with_both().build_ast is True

    def test_stats_come_from_text_not_markup(self):
        parsed = ContentProcessor.with_ast().parse_chapter(
            self._chapter(b'<p class="a-very-long-class-name">one two</p>')
        )
        assert parsed.word_count == 2
        assert parsed.char_count == len("one two")
