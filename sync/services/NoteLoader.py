"""Reads markdown notes from a vault directory into Document models."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import frontmatter

from shared.models.document import Document

NOTE_SUFFIX = ".md"


def iter_note_paths(root: Path) -> Iterator[str]:
    """Yield the vault-relative POSIX paths of all notes below root.

    Hidden files and anything inside hidden directories (e.g. ".obsidian",
    ".trash") are skipped.

    Args:
        root (Path): The vault directory.

    Yields:
        str: Relative paths such as "daily/2025-07-22.md", sorted.
    """
    for path in sorted(root.rglob(f"*{NOTE_SUFFIX}")):
        if not path.is_file():
            continue
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        yield relative.as_posix()


def load_note(root: Path, relative_path: str) -> Document:
    """Load one note, splitting off its YAML frontmatter.

    Args:
        root (Path): The vault directory.
        relative_path (str): The note path relative to root.

    Returns:
        Document: id and path are the relative path; last_modified is the file mtime (UTC).

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the frontmatter is not valid YAML.
    """
    full_path = root / relative_path
    raw = full_path.read_text(encoding="utf-8", errors="replace")
    post = frontmatter.loads(raw)
    mtime = full_path.stat().st_mtime

    return Document(
        id=relative_path,
        path=relative_path,
        content=post.content,
        frontmatter=dict(post.metadata or {}),
        last_modified=datetime.fromtimestamp(mtime, tz=timezone.utc),
    )
