"""Block tree, post, and SEO data models shared by every pipeline pass"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from blogkit.crud.models import PostStatus


class BlockType(str, Enum):
    """Node types the editor produces; the vocabulary stays open to unknown types."""
    paragraph = "paragraph"
    heading = "heading"
    bullet_list = "bulletList"
    ordered_list = "orderedList"
    list_item = "listItem"
    task_list = "taskList"
    task_item = "taskItem"
    blockquote = "blockquote"
    code_block = "codeBlock"
    image = "image"
    horizontal_rule = "horizontalRule"
    table = "table"
    table_row = "tableRow"
    table_header = "tableHeader"
    table_cell = "tableCell"
    callout = "callout"
    faq = "faq"
    faq_item = "faqItem"
    faq_question = "faqQuestion"
    faq_answer = "faqAnswer"
    table_of_contents = "tableOfContents"
    html = "html"
    embed = "embed"
    text = "text"
    hard_break = "hardBreak"


class Mark(BaseModel):
    """Inline decoration applied to a text node (bold, link, ...)."""
    model_config = ConfigDict(extra="allow")
    type: str
    attrs: Optional[dict[str, Any]] = None


class BlockNode(BaseModel):
    """A node of the block tree. Extra keys are kept so trees round-trip unchanged."""
    model_config = ConfigDict(extra="allow")
    type: str
    attrs: Optional[dict[str, Any]] = None
    content: Optional[list["BlockNode"]] = None
    text: Optional[str] = None
    marks: Optional[list[Mark]] = None

    def attr(self, name: str, default: Any = None) -> Any:
        """Return attrs[name], or default when attrs or the key is missing."""
        return (self.attrs or {}).get(name, default)


class Document(BaseModel):
    """Root of a block tree: {type: 'doc', content: [...]}"""
    model_config = ConfigDict(extra="allow")
    type: str = "doc"
    content: list[BlockNode] = []

    @field_validator("content", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v


DocumentLike = Union[Document, dict, list]


def as_document(doc: DocumentLike) -> Document:
    """Validate doc once at the boundary: a Document, a raw doc mapping, or a list of blocks."""
    if isinstance(doc, Document):
        return doc
    if isinstance(doc, list):
        return Document(content=doc)
    return Document.model_validate(doc)


def dump_blocks(blocks: list[BlockNode]) -> list[dict[str, Any]]:
    """Serialize blocks to plain JSON-ready dicts (absent fields omitted)."""
    return [b.model_dump(exclude_none=True) for b in blocks]


class Heading(BaseModel):
    """Table-of-contents entry; id matches the rendered heading's id attribute."""
    id: str
    text: str
    level: int


class FAQItem(BaseModel):
    question: str                   # plain text
    answer: str                     # rendered HTML


class CheckStatus(str, Enum):
    passed = "pass"
    warned = "warn"
    failed = "fail"


class Verdict(str, Enum):
    good = "good"
    ok = "ok"
    poor = "poor"


class SEOCheck(BaseModel):
    id: str
    status: CheckStatus
    message: str


class SEOScore(BaseModel):
    overall: Verdict
    checks: list[SEOCheck]


class _CamelModel(BaseModel):
    """Accepts both snake_case and the editor's camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PostSEO(_CamelModel):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    og_image: Optional[str] = None
    og_type: str = "article"
    no_index: bool = False
    structured_data: Optional[dict[str, Any]] = None
    focus_keyword: Optional[str] = None


class Author(_CamelModel):
    name: str = "Admin"
    url: Optional[str] = None


class MediaReference(_CamelModel):
    """Reference to an uploaded image; only the URL and alt matter here."""
    id: Optional[str] = Field(default=None, alias="_id")
    url: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class PostInput(_CamelModel):
    """Authoring input for one post, as read from a source file or passed to create/update."""
    title: str = Field(..., min_length=1)
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: list[BlockNode] = []
    cover_image: Optional[MediaReference] = None
    categories: list[str] = []
    tags: list[str] = []
    author: Optional[Author] = None
    seo: PostSEO = Field(default_factory=PostSEO)
    status: PostStatus = PostStatus.draft
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None


class PostView(_CamelModel):
    """A fully assembled post: the input to the scorer and the meta/feed generators."""
    title: str
    slug: str
    excerpt: str = ""
    content_html: str = ""
    content_text: str = ""
    word_count: int = 0
    reading_time: int = 1
    cover_image: Optional[MediaReference] = None
    categories: list[str] = []
    tags: list[str] = []
    author: Author = Field(default_factory=Author)
    seo: PostSEO = Field(default_factory=PostSEO)
    status: PostStatus = PostStatus.draft
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PipelineResult(BaseModel):
    """Output bundle of one render -> extract -> measure run, stored on the post."""
    content: list[BlockNode]
    content_html: str
    content_text: str
    word_count: int
    reading_time: int
    excerpt: str


class SearchResult(BaseModel):
    slug: str
    title: str
    excerpt: str
    score: int
