"""Title and tag resolution for notes."""

import re
from pathlib import PurePosixPath

from shared.models.document import Document

_H1_PATTERN = re.compile(r"^#\s+(.+)$")
_INLINE_TAG_PATTERN = re.compile(r"#([\w-]+)")


def extract_title(document: Document) -> str:
    """Resolve the display title of a note.

    Order: frontmatter "title" → first level-1 heading of the body → file name
    without extension.

    Args:
        document (Document): The note.

    Returns:
        str: The resolved title.
    """
    title = document.frontmatter.get("title")
    if title:
        return str(title)

    for line in document.content.split("\n"):
        match = _H1_PATTERN.match(line)
        if match:
            return match.group(1).strip()

    return PurePosixPath(document.path.replace("\\", "/")).stem or document.path


def extract_tags(document: Document) -> list[str]:
    """Collect frontmatter tags and inline #hashtags, deduplicated in first-seen order.

    Args:
        document (Document): The note.

    Returns:
        list[str]: Tag names without the leading '#'.
    """
    tags: list[str] = []

    fm_tags = document.frontmatter.get("tags")
    if isinstance(fm_tags, (list, tuple, set)):
        tags.extend(str(tag) for tag in fm_tags if tag is not None)
    elif fm_tags:
        tags.append(str(fm_tags))

    tags.extend(_INLINE_TAG_PATTERN.findall(document.content))

    return list(dict.fromkeys(tags))
