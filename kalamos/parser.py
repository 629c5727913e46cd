"""
Split source documents into TOML frontmatter and body, and render the body.

A document may open with a frontmatter block bracketed by ``+++`` lines::

    +++
    title = "Hello"
    +++
    Body text in markdown.

Any later ``+++`` lines belong to the body.
"""

import re
import tomllib
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import ContentBeforeFrontmatterError, InvalidFrontmatterError
from .markdown import render_markdown

FRONTMATTER_DELIMITER = '+++\n'
EXCERPT_MARKER = '<!--more-->'

EXCERPT_RE = re.compile(r'\s*' + re.escape(EXCERPT_MARKER) + r'\s*\n')


@dataclass(frozen=True)
class Document:
    """A parsed source document."""

    frontmatter: Dict[str, Any] = field(default_factory=dict)
    body_html: str = ''
    # None when the body has no excerpt marker; callers fall back to body_html
    excerpt_html: Optional[str] = None

    @property
    def effective_excerpt(self) -> str:
        return self.excerpt_html if self.excerpt_html is not None else self.body_html


def extract_frontmatter(text):
    """
    Separate the frontmatter block from the body.

    Args:
        text: Raw document text

    Returns:
        Tuple of (frontmatter mapping, body text). The mapping is empty when
        the text holds fewer than two delimiter lines.

    Raises:
        ContentBeforeFrontmatterError: Non-whitespace text precedes the block
        InvalidFrontmatterError: The block is not valid TOML
    """
    sections = text.split(FRONTMATTER_DELIMITER)
    if len(sections) < 3:
        return {}, text

    before, block, *rest = sections
    if before.strip():
        raise ContentBeforeFrontmatterError(before)
    try:
        frontmatter = tomllib.loads(block)
    except tomllib.TOMLDecodeError as e:
        raise InvalidFrontmatterError(str(e)) from e

    body = '\n+++\n'.join(rest)
    return frontmatter, body


def extract_excerpt(body, markdown=render_markdown):
    """Render everything before the excerpt marker, or return None without one."""
    parts = EXCERPT_RE.split(body, maxsplit=1)
    if len(parts) < 2:
        return None
    return markdown(parts[0])


def parse(text, markdown=render_markdown):
    """Parse a markdown document into a Document."""
    frontmatter, body = extract_frontmatter(text)
    return Document(
        frontmatter=frontmatter,
        body_html=markdown(body),
        excerpt_html=extract_excerpt(body, markdown),
    )
