"""Extraction settings and fixed format constants."""

from pydantic import BaseModel, ConfigDict

CONTAINER_PATH = "META-INF/container.xml"

# Chapter media type is not read from the manifest
XHTML_MEDIA_TYPE = "application/xhtml+xml"

# Entering one of these elements starts a new line in plain-text output
BLOCK_TAGS = frozenset(
    {"p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "br", "li"}
)


class ExtractorConfig(BaseModel):
    """Settings shared by the pipeline and the text extractor."""

    model_config = ConfigDict(frozen=True)

    # Recompute package and chapters on every request instead of memoizing
    low_memory: bool = False
    # Build an AST for every chapter in addition to plain text
    with_ast: bool = False
