"""Database table definitions for posts, revisions, and categories"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


class PostStatus(str, Enum):
    """Lifecycle states of a post"""
    draft = "draft"
    published = "published"
    scheduled = "scheduled"
    archived = "archived"


class Post(SQLModel, table=True):
    """A blog post: the raw block tree plus every artifact derived from it"""
    __tablename__ = "posts"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(..., index=True, unique=True, nullable=False)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    excerpt: str = Field(default="", sa_column=Column(Text, nullable=False))
    content: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    content_html: str = Field(default="", sa_column=Column(Text, nullable=False))
    content_text: str = Field(default="", sa_column=Column(Text, nullable=False))
    word_count: int = Field(default=0, nullable=False)
    reading_time: int = Field(default=1, nullable=False, description="Minutes at 200 words per minute")
    cover_image: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    categories: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    author: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    seo: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    status: PostStatus = Field(default=PostStatus.draft, index=True, nullable=False)
    published_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))
    scheduled_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))
    version: int = Field(default=1, nullable=False, description="Incremented on every content change")
    hash: str = Field(default="", sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    committed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))


class PostRevision(SQLModel, table=True):
    """Immutable snapshot of a post's content before an edit."""
    __tablename__ = "post_revisions"
    __table_args__ = (UniqueConstraint("post_id", "version", name="uq_postrev_post_version"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    post_id: UUID = Field(..., foreign_key="posts.id", index=True, nullable=False)
    version: int = Field(..., nullable=False, description="Post version the snapshot was taken from")
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    content: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    content_html: str = Field(default="", sa_column=Column(Text, nullable=False))
    saved_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class Category(SQLModel, table=True):
    """A named grouping of posts with its own listing page"""
    __tablename__ = "categories"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(..., index=True, unique=True, nullable=False)
    name: str = Field(..., sa_column=Column(Text, nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    position: int = Field(default=0, nullable=False, description="Sort order in category listings")
