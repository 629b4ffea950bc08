"""Post persistence: create, update, archive, lookup, listing, search, and upsert-by-slug"""

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from blogkit.core.content import process_content
from blogkit.core.metrics import EXCERPT_LENGTH
from blogkit.core.models import Author, PostInput, PostView, SearchResult, dump_blocks
from blogkit.core.utils.hashing import sha256_json
from blogkit.core.utils.slug import slugify
from blogkit.crud.categories import ensure_categories
from blogkit.crud.models import Post, PostRevision, PostStatus
from blogkit.crud.revisions import save_revision


logger = logging.getLogger(__name__)

SORT_FIELDS = {'published_at', 'created_at', 'updated_at', 'title'}


def get_by_slug(session: Session, slug: str) -> Post | None:
    """Return the Post with the given slug, or None if not found."""
    return session.exec(select(Post).where(Post.slug == slug)).one_or_none()


def get_by_id(session: Session, post_id: UUID) -> Post | None:
    return session.get(Post, post_id)


def ensure_unique_slug(session: Session, slug: str, exclude_id: UUID = None) -> str:
    """Return slug, or slug-1, slug-2, ... for the first candidate not used by another post."""
    candidate, counter = slug, 1
    while True:
        existing = get_by_slug(session, candidate)
        if existing is None or existing.id == exclude_id:
            return candidate
        candidate = f"{slug}-{counter}"
        counter += 1


def source_hash(data: PostInput) -> str:
    """Hash of the authoring input; unchanged hash means nothing to recompute."""
    return sha256_json(data.model_dump(mode='json'))


def _apply_content(post: Post, data: PostInput, excerpt_length: int) -> None:
    result = process_content(data.content, data.excerpt, excerpt_length)
    post.content = dump_blocks(result.content)
    post.content_html = result.content_html
    post.content_text = result.content_text
    post.word_count = result.word_count
    post.reading_time = result.reading_time
    post.excerpt = result.excerpt


def _apply_metadata(post: Post, data: PostInput) -> None:
    post.title = data.title
    post.cover_image = data.cover_image.model_dump(exclude_none=True) if data.cover_image else None
    post.tags = list(data.tags)
    post.seo = data.seo.model_dump(exclude_none=True)
    post.scheduled_at = data.scheduled_at


def create_post(
    session: Session,
    data: PostInput,
    excerpt_length: int = EXCERPT_LENGTH,
    default_author: Optional[Author] = None,
    committed_at: datetime | None = None,
    ) -> Post:
    """Insert a new post, running the content pipeline once.

    The slug (given, else derived from the title) is made unique. A post
    created as published gets published_at now unless one was supplied.
    Flushes but does not commit.
    """
    now = datetime.now()
    post = Post(
        slug=ensure_unique_slug(session, data.slug or slugify(data.title)),
        title=data.title,
        status=data.status,
        author=(data.author or default_author or Author()).model_dump(exclude_none=True),
        categories=ensure_categories(session, data.categories),
        published_at=data.published_at or (now if data.status == PostStatus.published else None),
        hash=source_hash(data),
        committed_at=committed_at,
        created_at=now,
        updated_at=now,
    )
    _apply_metadata(post, data)
    _apply_content(post, data, excerpt_length)
    session.add(post)
    session.flush()
    logger.info("Created post %s", post.slug)
    return post


def to_input(post: Post) -> PostInput:
    """Rebuild the authoring input a stored post corresponds to."""
    return PostInput.model_validate({
        'title': post.title,
        'slug': post.slug,
        'excerpt': post.excerpt,
        'content': post.content,
        'cover_image': post.cover_image,
        'categories': post.categories,
        'tags': post.tags,
        'author': post.author or None,
        'seo': post.seo,
        'status': post.status,
        'published_at': post.published_at,
        'scheduled_at': post.scheduled_at,
    })


def update_post(
    session: Session,
    post: Post,
    changes: dict[str, Any],
    max_revisions: int = 10,
    excerpt_length: int = EXCERPT_LENGTH,
    ) -> Post:
    """Apply a partial update keyed by PostInput field names.

    When 'content' is present the pipeline re-runs (the excerpt is regenerated
    unless one is supplied); if the tree actually changed, the previous state
    is saved as a revision and the version is bumped. Moving to published for
    the first time stamps published_at. Flushes but does not commit.
    """
    current = to_input(post).model_dump()
    if 'content' in changes and 'excerpt' not in changes:
        current['excerpt'] = None
    data = PostInput.model_validate({**current, **changes})

    if 'slug' in changes and data.slug != post.slug:
        post.slug = ensure_unique_slug(session, data.slug or slugify(data.title), exclude_id=post.id)
    if 'categories' in changes:
        post.categories = ensure_categories(session, data.categories)
    if 'author' in changes and data.author:
        post.author = data.author.model_dump(exclude_none=True)

    if 'content' in changes:
        new_tree = dump_blocks(data.content)
        if new_tree != post.content:
            save_revision(session, post, max_revisions)
            post.version += 1
        _apply_content(post, data, excerpt_length)
    elif 'excerpt' in changes:
        post.excerpt = data.excerpt or ''

    _apply_metadata(post, data)
    if data.status == PostStatus.published and post.status != PostStatus.published:
        post.published_at = changes.get('published_at') or datetime.now()
    elif changes.get('published_at') is not None:
        post.published_at = changes['published_at']
    post.status = data.status
    post.hash = source_hash(data)
    post.updated_at = datetime.now()
    session.add(post)
    session.flush()
    logger.info("Updated post %s (version %d)", post.slug, post.version)
    return post


def delete_post(session: Session, post: Post) -> Post:
    """Soft delete: archive the post."""
    post.status = PostStatus.archived
    post.updated_at = datetime.now()
    session.add(post)
    session.flush()
    return post


def hard_delete_post(session: Session, post: Post) -> None:
    """Remove the post and its revisions."""
    for rev in session.exec(select(PostRevision).where(PostRevision.post_id == post.id)).all():
        session.delete(rev)
    session.delete(post)
    session.flush()


def commit_post(
    session: Session,
    data: PostInput,
    max_revisions: int = 10,
    excerpt_length: int = EXCERPT_LENGTH,
    committed_at: datetime | None = None,
    ) -> tuple[Post, str]:
    """Upsert a source post by slug.

    Returns (post, status) where status is 'created', 'updated', or 'unchanged'.
    committed_at is set on created/updated posts only.
    """
    slug = data.slug or slugify(data.title)
    data = data.model_copy(update={'slug': slug})
    post = get_by_slug(session, slug)

    if post is None:
        return create_post(session, data, excerpt_length, committed_at=committed_at), 'created'
    if post.hash == source_hash(data):
        return post, 'unchanged'

    changes = data.model_dump()
    update_post(session, post, changes, max_revisions, excerpt_length)
    post.committed_at = committed_at
    session.add(post)
    session.flush()
    return post, 'updated'


def _matches(post: Post, terms: list[str]) -> int:
    """Number of term occurrences across title/excerpt/text; 0 if any term is absent."""
    haystack = ' '.join((post.title, post.excerpt, post.content_text)).lower()
    counts = [haystack.count(t) for t in terms]
    return sum(counts) if all(counts) else 0


def _sort_key(field: str):
    def _key(post: Post):
        value = getattr(post, field)
        return (value is not None, value if value is not None else '')
    return _key


def list_posts(
    session: Session,
    page: int = 1,
    limit: int = 10,
    category: str = None,
    tag: str = None,
    status: PostStatus = None,
    search: str = None,
    sort_by: str = 'published_at',
    sort_order: str = 'desc',
    ) -> tuple[list[Post], int]:
    """Return (page of posts, total matches). Archived posts are hidden unless asked for."""
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by {sort_by!r}; expected one of {sorted(SORT_FIELDS)}")

    query = select(Post)
    query = query.where(Post.status == status) if status else query.where(Post.status != PostStatus.archived)
    posts = list(session.exec(query).all())

    if category:
        posts = [p for p in posts if category in (p.categories or [])]
    if tag:
        posts = [p for p in posts if tag in (p.tags or [])]
    if search:
        terms = search.lower().split()
        posts = [p for p in posts if _matches(p, terms)]

    posts.sort(key=_sort_key(sort_by), reverse=sort_order == 'desc')
    start = (max(page, 1) - 1) * limit
    return posts[start:start + limit], len(posts)


def search_posts(session: Session, query: str, limit: int = 10) -> list[SearchResult]:
    """Published posts matching every query term, best match first."""
    terms = query.lower().split()
    if not terms:
        return []
    published = session.exec(select(Post).where(Post.status == PostStatus.published)).all()
    scored = [(p, _matches(p, terms)) for p in published]
    ranked = sorted((s for s in scored if s[1]), key=lambda s: s[1], reverse=True)[:limit]
    return [SearchResult(slug=p.slug, title=p.title, excerpt=p.excerpt, score=score) for p, score in ranked]


def get_published(session: Session, limit: int = None) -> list[Post]:
    """Published posts, newest first."""
    query = (
        select(Post)
        .where(Post.status == PostStatus.published)
        .order_by(Post.published_at.desc())
    )
    if limit:
        query = query.limit(limit)
    return list(session.exec(query).all())


def get_last_committed(session: Session) -> list[Post]:
    """Return posts from the most recent commit batch (MAX committed_at)."""
    max_ts = session.exec(select(func.max(Post.committed_at))).one()
    if max_ts is None:
        return []
    return list(session.exec(select(Post).where(Post.committed_at == max_ts)).all())


def get_all_posts(session: Session) -> list[Post]:
    return list(session.exec(select(Post)).all())


def to_view(post: Post) -> PostView:
    """Assemble the scorer/generator view of a stored post."""
    return PostView.model_validate({
        'title': post.title,
        'slug': post.slug,
        'excerpt': post.excerpt,
        'content_html': post.content_html,
        'content_text': post.content_text,
        'word_count': post.word_count,
        'reading_time': post.reading_time,
        'cover_image': post.cover_image,
        'categories': post.categories,
        'tags': post.tags,
        'author': post.author or {},
        'seo': post.seo or {},
        'status': post.status,
        'published_at': post.published_at,
        'created_at': post.created_at,
        'updated_at': post.updated_at,
    })
