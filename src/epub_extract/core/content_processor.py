"""Process chapter HTML into plain text and an AST."""

import warnings

from bs4 import BeautifulSoup, CData, Comment, NavigableString, Tag
from bs4 import XMLParsedAsHTMLWarning
from bs4.element import PreformattedString

from epub_extract.config import BLOCK_TAGS, ExtractorConfig
from epub_extract.models.ast import CommentNode, ElementNode, TextNode
from epub_extract.models.epub import Chapter, ParsedChapter

# Suppress XML parsing warnings - EPUB chapters are usually XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)


def make_soup(html: str | bytes) -> BeautifulSoup:
    """Build an HTML tree. Bytes are decoded as UTF-8 with replacement."""
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")
    # Re-encode so lxml never sees a conflicting charset declaration
    return BeautifulSoup(
        html.encode("utf-8"),
        "lxml",
        from_encoding="utf-8",
        multi_valued_attributes=None,
    )


def _is_text(node: object) -> bool:
    # Comments, doctypes, declarations and PIs are all PreformattedStrings
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def soup_to_text(soup: BeautifulSoup) -> str:
    """Walk the tree in document order, breaking lines at block elements."""
    parts: list[str] = []
    for node in soup.descendants:
        if isinstance(node, Tag):
            if node.name in BLOCK_TAGS:
                parts.append("\n")
        elif _is_text(node):
            parts.append(str(node))

    lines = (line.strip() for line in "".join(parts).split("\n"))
    return "\n".join(line for line in lines if line)


def _element_node(tag: Tag) -> ElementNode:
    attrs: dict[str, str] = {}
    for key, value in tag.attrs.items():
        attrs[key] = value if isinstance(value, str) else " ".join(value)
    return ElementNode(tag=tag.name, attrs=attrs)


def soup_to_ast(soup: BeautifulSoup) -> ElementNode:
    """Mirror the tree as AST nodes.

    Uses an explicit stack so deeply nested markup cannot exhaust the
    interpreter's recursion limit.
    """
    root = soup.find("html") or soup
    root_node = _element_node(root)
    stack = [(root, root_node)]

    while stack:
        tag, node = stack.pop()
        for child in tag.children:
            if isinstance(child, Tag):
                child_node = _element_node(child)
                node.children.append(child_node)
                stack.append((child, child_node))
            elif isinstance(child, Comment):
                node.children.append(CommentNode(content=str(child)))
            elif isinstance(child, CData) or _is_text(child):
                node.children.append(TextNode(content=str(child)))

    return root_node


def extract_text_content(html: str | bytes) -> str:
    """Plain text of an HTML document, one block per line."""
    return soup_to_text(make_soup(html))


def parse_html_ast(html: str | bytes) -> ElementNode:
    """AST of an HTML document, rooted at its ``html`` element."""
    return soup_to_ast(make_soup(html))


def get_stats(content: str) -> dict[str, int]:
    """Calculate content statistics."""
    return {
        "word_count": len(content.split()),
        "character_count": len(content),
    }


class ContentProcessor:
    """Turn raw chapters into ParsedChapters.

    Plain text is always produced; the AST only when ``build_ast`` is set.
    Statistics are computed from the plain text in both cases.
    """

    def __init__(self, build_ast: bool = False):
        self.build_ast = build_ast

    @classmethod
    def text_only(cls) -> "ContentProcessor":
        """Text without AST (fastest)."""
        return cls(build_ast=False)

    @classmethod
    def with_ast(cls) -> "ContentProcessor":
        """Text plus AST."""
        return cls(build_ast=True)

    @classmethod
    def with_both(cls) -> "ContentProcessor":
        """Alias of ``with_ast``; text is never skipped."""
        return cls(build_ast=True)

    @classmethod
    def from_config(cls, config: ExtractorConfig) -> "ContentProcessor":
        return cls(build_ast=config.with_ast)

    def process(self, html_content: bytes) -> tuple[str, ElementNode | None]:
        """Return the plain text and, if enabled, the AST of one chapter."""
        soup = make_soup(html_content)
        text = soup_to_text(soup)
        ast = soup_to_ast(soup) if self.build_ast else None
        return text, ast

    def parse_chapter(self, chapter: Chapter) -> ParsedChapter:
        """Parse one raw chapter."""
        content, ast = self.process(chapter.content)
        stats = get_stats(content)
        return ParsedChapter(
            chapter_info=chapter,
            content=content,
            ast=ast,
            word_count=stats["word_count"],
            char_count=stats["character_count"],
        )
