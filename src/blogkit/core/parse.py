"""Post source discovery and loading: JSON, YAML, or Markdown with YAML front matter"""

import json
import re
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import yaml

from blogkit.core.extract.text import text_content
from blogkit.core.markdown import split_title
from blogkit.core.models import PostInput
from blogkit.core.utils.slug import slugify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}
DATA_EXTENSIONS = {'.json', '.yaml', '.yml'}
SOURCE_EXTENSIONS = MD_EXTENSIONS | DATA_EXTENSIONS


def _load_yaml(text: str, what: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML {what}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML {what}: expected a mapping, got {type(data).__name__}")
    return data


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        return _load_yaml(m.group(1), "frontmatter"), text[m.end():]
    return {}, text


def _dates_to_datetimes(data: dict[str, Any]) -> dict[str, Any]:
    """YAML parses bare dates as date objects; widen them to midnight datetimes."""
    return {
        k: datetime.combine(v, time()) if isinstance(v, date) and not isinstance(v, datetime) else v
        for k, v in data.items()
    }


def discover_files(path: Path) -> list[Path]:
    """Return sorted post source files under path, or [path] if a single source file."""
    if path.is_file():
        return [path] if path.suffix in SOURCE_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in SOURCE_EXTENSIONS)


def _parse_markdown(raw: str, path: Path, parser_config: str) -> dict[str, Any]:
    frontmatter, body = _strip_frontmatter(raw)
    heading, blocks = split_title(body, parser_config)
    if heading is not None:
        frontmatter.setdefault('title', text_content(heading))
    frontmatter.setdefault('title', path.stem)
    return {**frontmatter, 'content': blocks}


def parse_file(path: Path, parser_config: str = 'gfm-like') -> PostInput:
    """Load one source file into a PostInput. Raises ValueError on malformed input."""
    raw = path.read_text(encoding='utf-8')
    if path.suffix in MD_EXTENSIONS:
        data = _parse_markdown(raw, path, parser_config)
    elif path.suffix == '.json':
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid JSON: expected an object, got {type(data).__name__}")
    elif path.suffix in DATA_EXTENSIONS:
        data = _load_yaml(raw, "document")
    else:
        raise ValueError(f"Unsupported source file type: {path.suffix}")

    data = _dates_to_datetimes(data)
    data.setdefault('slug', slugify(path.stem))
    return PostInput.model_validate(data)
