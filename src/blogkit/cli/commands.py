"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from blogkit.config import Settings, load_config
from blogkit.core.pipeline import run_build, run_commit, run_export
from blogkit.core.seo.scorer import score_post
from blogkit.crud.database import init_db, make_engine, reset_db
from blogkit.crud.models import Post, PostStatus
from blogkit.crud.posts import get_all_posts, get_by_slug, get_last_committed, get_published, list_posts, to_view
from blogkit.crud.revisions import diff_revisions, list_revisions, revert_to_revision


state = {"verbose": False}

ParserOption = Annotated[str, typer.Option("--parser-config", help="MarkdownIt preset for Markdown sources")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and set the package log level."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.getLogger("blogkit").setLevel(logging.DEBUG if state["verbose"] else settings.log_level)
    return settings


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def _require_post(session: Session, slug: str) -> Post:
    post = get_by_slug(session, slug)
    if post is None:
        _fail(f"No post with slug '{slug}'")
    return post


def _echo_commit(counts: dict, changes: list) -> None:
    """Print per-post commit status and a summary line."""
    for status, slug in changes:
        typer.echo(f"  {status}: {slug}")
    typer.echo(
        f"Commit complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged"
    )


def _echo_export(results: list, output_dir: Path) -> None:
    for slug, html_path in results:
        typer.echo(f"  {slug} -> {html_path}")
    typer.echo(f"Exported {len(results)} post(s) to {output_dir}/")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def build_cmd(
    path: Annotated[str, typer.Argument(help="Post source file or directory")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    parser: ParserOption = "gfm-like",
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Process and score without saving or writing files")] = False,
    ):
    """Run the full pipeline: load -> commit -> export."""
    settings = _settings(overrides={"output_dir": out})

    if dry_run:
        try:
            built = run_build(path, settings, parser)
        except RuntimeError as e:
            _fail(str(e))
        for src, view in built:
            score = score_post(view)
            typer.echo(f"  {src}: {view.slug} ({view.word_count} words, {view.reading_time} min) seo={score.overall.value}")
        typer.echo(f"Built {len(built)} post(s)")
        return

    engine = _engine(settings)
    try:
        counts, changes = run_commit(engine, path, settings, parser)
    except Exception as e:
        _fail("Commit failed", e)
    if not counts:
        typer.echo(f"No post sources found under {path}.")
        raise typer.Exit(1)
    _echo_commit(counts, changes)

    output_dir = Path(settings.output_dir)
    try:
        with Session(engine) as session:
            results = run_export(session, get_last_committed(session), output_dir, settings)
    except Exception as e:
        _fail("Export failed", e)
    _echo_export(results, output_dir)


def commit_cmd(
    path: Annotated[str, typer.Argument(help="Post source file or directory")],
    parser: ParserOption = "gfm-like",
    ):
    """Upsert post sources into the database by slug."""
    settings = _settings()
    engine = _engine(settings)
    try:
        counts, changes = run_commit(engine, path, settings, parser)
    except Exception as e:
        _fail("Commit failed", e)
    if not counts:
        typer.echo(f"No post sources found under {path}.")
        raise typer.Exit(1)
    _echo_commit(counts, changes)


def export_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    slug: Annotated[Optional[str], typer.Option("--slug", help="Export only this post")] = None,
    all_posts: Annotated[bool, typer.Option("--all", help="Export every published post")] = False,
    ):
    """Write post HTML + sidecar JSON, rss.xml, and sitemap.xml to the output dir."""
    settings = _settings(overrides={"output_dir": out})
    engine = _engine(settings)
    output_dir = Path(settings.output_dir)

    try:
        with Session(engine) as session:
            if slug:
                posts = [_require_post(session, slug)]
                scope = f"slug '{slug}'"
            elif all_posts:
                posts = get_published(session)
                scope = "all published"
            else:
                posts = get_last_committed(session)
                scope = "last commit"

            if not posts:
                typer.echo(f"No posts found for scope: {scope}.")
                raise typer.Exit(1)

            results = run_export(session, posts, output_dir, settings)
    except typer.Exit:
        raise
    except Exception as e:
        _fail("Export failed", e)
    _echo_export(results, output_dir)


def list_cmd(
    status: Annotated[Optional[PostStatus], typer.Option("--status", help="Only posts in this state")] = None,
    search: Annotated[Optional[str], typer.Option("--search", help="Match words in title, excerpt, or text")] = None,
    category: Annotated[Optional[str], typer.Option("--category", help="Category slug")] = None,
    tag: Annotated[Optional[str], typer.Option("--tag")] = None,
    page: Annotated[int, typer.Option("--page", min=1)] = 1,
    limit: Annotated[Optional[int], typer.Option("--limit", min=1, help="Defaults to posts_per_page")] = None,
    ):
    """List stored posts, newest first."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        posts, total = list_posts(
            session, page=page, limit=limit or settings.posts_per_page,
            category=category, tag=tag, status=status, search=search,
        )
        rows = [(p.slug, p.status.value, p.title) for p in posts]
        if not total and not get_all_posts(session):
            typer.echo("No posts found in database.")
            raise typer.Exit(1)
    for row in rows:
        typer.echo("\t".join(row))
    typer.echo(f"{len(rows)} of {total} post(s)")


def score_cmd(
    slug: Annotated[str, typer.Argument(help="Post slug")],
    ):
    """Run the SEO checks for a stored post."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        score = score_post(to_view(_require_post(session, slug)))
    for check in score.checks:
        typer.echo(f"  [{check.status.value}] {check.id}: {check.message}")
    typer.echo(f"Overall: {score.overall.value}")


def revisions_cmd(
    slug: Annotated[str, typer.Argument(help="Post slug")],
    from_version: Annotated[Optional[int], typer.Option("--from", help="Diff from this revision")] = None,
    to_version: Annotated[Optional[int], typer.Option("--to", help="Diff to this revision")] = None,
    ):
    """List stored revisions of a post, or diff two of them with --from/--to."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        post = _require_post(session, slug)
        if from_version is not None and to_version is not None:
            try:
                lines = diff_revisions(session, post.id, from_version, to_version)
            except ValueError as e:
                _fail(str(e))
            typer.echo("".join(lines), nl=False)
            return
        revisions = [(r.version, r.saved_at, r.title) for r in list_revisions(session, post.id)]
        current = post.version

    if not revisions:
        typer.echo(f"No revisions stored for {slug} (current version {current}).")
        return
    for version, saved_at, title in revisions:
        typer.echo(f"  v{version}\t{saved_at:%Y-%m-%d %H:%M}\t{title}")
    typer.echo(f"Current version: {current}")


def revert_cmd(
    slug: Annotated[str, typer.Argument(help="Post slug")],
    version: Annotated[int, typer.Argument(help="Revision to restore")],
    ):
    """Restore a stored revision as the post's new current version."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        post = _require_post(session, slug)
        try:
            revert_to_revision(session, post, version, settings.max_revisions, settings.excerpt_length)
        except ValueError as e:
            _fail(str(e))
        session.commit()
        typer.echo(f"Reverted {slug} to revision {version} (now version {post.version})")
