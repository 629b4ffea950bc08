"""Post revision persistence: save, prune, list, diff, and revert operations"""

import json
import logging
from datetime import datetime
from uuid import UUID

from sqlmodel import Session, select

from blogkit.core.content import process_content
from blogkit.core.metrics import EXCERPT_LENGTH
from blogkit.core.models import dump_blocks
from blogkit.core.utils.diff import unified_diff
from blogkit.crud.models import Post, PostRevision


logger = logging.getLogger(__name__)


def get_revision(session: Session, post_id: UUID, version: int) -> PostRevision:
    """Return one stored revision. Raises ValueError if it is missing."""
    rev = session.exec(
        select(PostRevision)
        .where(PostRevision.post_id == post_id)
        .where(PostRevision.version == version)
    ).one_or_none()
    if rev is None:
        raise ValueError(f"Revision {version} not found for post {post_id}")
    return rev


def diff_revisions(session: Session, post_id: UUID, from_version: int, to_version: int, context: int = 3) -> list[str]:
    """Unified diff lines between the block trees of two stored revisions."""
    def _tree(rev: PostRevision) -> str:
        return json.dumps(rev.content, indent=2, ensure_ascii=False) + "\n"

    old, new = get_revision(session, post_id, from_version), get_revision(session, post_id, to_version)
    return unified_diff(_tree(old), _tree(new), f"v{from_version}", f"v{to_version}", context)


def list_revisions(session: Session, post_id: UUID) -> list[PostRevision]:
    """Return all revisions for a post ordered by version ascending."""
    return list(
        session.exec(
            select(PostRevision)
            .where(PostRevision.post_id == post_id)
            .order_by(PostRevision.version.asc())
        ).all()
    )


def prune_revisions(session: Session, post_id: UUID, max_revisions: int) -> int:
    """Delete oldest revisions beyond max_revisions. Returns count deleted. No-op if max_revisions=0."""
    if max_revisions == 0:
        return 0

    revisions = list_revisions(session, post_id)
    excess = len(revisions) - max_revisions
    if excess <= 0:
        return 0

    for rev in revisions[:excess]:
        session.delete(rev)
    session.flush()
    logger.debug("Pruned %d revision(s) of post %s", excess, post_id)
    return excess


def save_revision(session: Session, post: Post, max_revisions: int = 10) -> PostRevision:
    """Snapshot the post's current title and content as revision `post.version`.

    Prunes to the newest max_revisions afterwards when max_revisions > 0.
    """
    rev = PostRevision(
        post_id=post.id,
        version=post.version,
        title=post.title,
        content=list(post.content or []),
        content_html=post.content_html,
    )
    session.add(rev)
    session.flush()
    logger.info("Saved revision %d of %s", rev.version, post.slug)

    if max_revisions > 0:
        prune_revisions(session, post.id, max_revisions)
    return rev


def revert_to_revision(
    session: Session,
    post: Post,
    version: int,
    max_revisions: int = 10,
    excerpt_length: int = EXCERPT_LENGTH,
    ) -> Post:
    """Promote a stored revision's content as a new version of the post.

    Snapshots the current state first (so it becomes part of history) and
    re-runs the content pipeline on the restored tree.
    Flushes but does not commit; the caller controls the transaction.
    Raises ValueError if the revision is not found.
    """
    target = get_revision(session, post.id, version)
    title, content = target.title, list(target.content)

    save_revision(session, post, max_revisions=max_revisions)

    result = process_content(content, excerpt_length=excerpt_length)
    post.title = title
    post.content = dump_blocks(result.content)
    post.content_html = result.content_html
    post.content_text = result.content_text
    post.word_count = result.word_count
    post.reading_time = result.reading_time
    post.excerpt = result.excerpt
    post.version += 1
    post.updated_at = datetime.now()
    session.add(post)
    session.flush()
    logger.info("Reverted %s to revision %d (now version %d)", post.slug, version, post.version)
    return post
