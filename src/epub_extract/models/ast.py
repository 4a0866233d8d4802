"""HTML abstract syntax tree nodes."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class ElementNode(BaseModel):
    """An HTML element with its attributes and ordered children."""

    type: Literal["element"] = "element"
    tag: str
    attrs: dict[str, str] = Field(default_factory=dict)
    children: list["AstNode"] = Field(default_factory=list)


class TextNode(BaseModel):
    """Raw text run; never merged with neighbouring text nodes."""

    type: Literal["text"] = "text"
    content: str


class CommentNode(BaseModel):
    """HTML comment body."""

    type: Literal["comment"] = "comment"
    content: str


AstNode = Annotated[
    Union[ElementNode, TextNode, CommentNode], Field(discriminator="type")
]

ElementNode.model_rebuild()

ast_adapter: TypeAdapter[AstNode] = TypeAdapter(AstNode)
