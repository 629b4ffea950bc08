"""Category persistence"""

from sqlmodel import Session, select

from blogkit.core.utils.slug import slugify
from blogkit.crud.models import Category


def get_category_by_slug(session: Session, slug: str) -> Category | None:
    return session.exec(select(Category).where(Category.slug == slug)).one_or_none()


def list_categories(session: Session) -> list[Category]:
    """Return all categories ordered by position, then name."""
    return list(session.exec(select(Category).order_by(Category.position, Category.name)).all())


def create_category(
    session: Session,
    name: str,
    slug: str = None,
    description: str = None,
    position: int = 0,
    ) -> Category:
    """Create a category; slug defaults to slugify(name) and is de-duplicated with -1, -2, ..."""
    base = slug or slugify(name)
    candidate, counter = base, 1
    while get_category_by_slug(session, candidate):
        candidate = f"{base}-{counter}"
        counter += 1

    category = Category(name=name, slug=candidate, description=description, position=position)
    session.add(category)
    session.flush()
    return category


def ensure_categories(session: Session, names: list[str]) -> list[str]:
    """Return the slug for each name, creating missing categories on the way."""
    slugs = []
    for name in names:
        slug = slugify(name)
        if not slug:
            continue
        if get_category_by_slug(session, slug) is None:
            session.add(Category(name=name, slug=slug))
            session.flush()
        slugs.append(slug)
    return list(dict.fromkeys(slugs))
