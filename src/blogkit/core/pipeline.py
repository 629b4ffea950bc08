"""Pipeline step functions: load, commit, and export orchestration"""

import logging
from datetime import datetime
from pathlib import Path

from sqlmodel import Session

from blogkit.config import Settings
from blogkit.core.content import assemble_post
from blogkit.core.export import write_feeds, write_post
from blogkit.core.models import PostInput, PostView
from blogkit.core.parse import discover_files, parse_file
from blogkit.crud.models import Post
from blogkit.crud.posts import commit_post


logger = logging.getLogger(__name__)


def load_sources(path: str, parser_config: str = 'gfm-like') -> list[tuple[Path, PostInput]]:
    """Parse every source file under path. Raises RuntimeError naming the first file that fails."""
    results = []
    for p in discover_files(Path(path)):
        try:
            results.append((p, parse_file(p, parser_config)))
        except Exception as e:
            raise RuntimeError(f"Failed to load {p}: {e}") from e
    return results


def run_build(path: str, settings: Settings, parser_config: str = 'gfm-like') -> list[tuple[Path, PostView]]:
    """Load and process sources without touching the database. Returns (source_path, view) pairs."""
    return [
        (p, assemble_post(data, excerpt_length=settings.excerpt_length))
        for p, data in load_sources(path, parser_config)
    ]


def run_commit(
    engine,
    path: str,
    settings: Settings,
    parser_config: str = 'gfm-like',
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Load sources under path and upsert them by slug in one transaction.

    Returns (counts, changes) where changes is a list of (status, slug) for
    created/updated posts. Returns ({}, []) when no source files are found.
    """
    sources = load_sources(path, parser_config)
    if not sources:
        return {}, []

    committed_at = datetime.now()
    counts = {"created": 0, "updated": 0, "unchanged": 0}
    changes = []
    with Session(engine) as session:
        for _, data in sources:
            post, status = commit_post(
                session, data, settings.max_revisions, settings.excerpt_length, committed_at,
            )
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, post.slug))
        session.commit()
    logger.info("Committed %d source file(s): %s", len(sources), counts)
    return counts, changes


def run_export(
    session: Session,
    posts: list[Post],
    output_dir: Path,
    settings: Settings,
    ) -> list[tuple[str, Path]]:
    """Write posts and feeds to output_dir using an open session. Returns (slug, html_path) pairs."""
    results = []
    for post in posts:
        html_path, _ = write_post(post, session, output_dir, settings)
        results.append((post.slug, html_path))
    write_feeds(session, output_dir, settings)
    logger.info("Exported %d post(s) to %s", len(results), output_dir)
    return results
