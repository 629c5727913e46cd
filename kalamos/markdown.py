"""
Markdown to HTML conversion with Pygments highlighting of code blocks.
"""

import logging

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .errors import ConfigError

DEFAULT_THEME = 'default'

logger = logging.getLogger('Kalamos.markdown')


class HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer that replaces plain code blocks with highlighted markup."""

    def __init__(self, theme=DEFAULT_THEME):
        super().__init__(escape=False)
        try:
            get_style_by_name(theme)
        except ClassNotFound as e:
            raise ConfigError(f"Unknown highlight theme {theme!r}") from e
        self.formatter = HtmlFormatter(style=theme, noclasses=True)

    def lexer_for(self, info):
        """Pick a lexer from the fence's language token, falling back to plain text."""
        token = info.split()[0] if info and info.strip() else ''
        if not token:
            return TextLexer()
        try:
            return get_lexer_by_name(token)
        except ClassNotFound:
            logger.debug(f"No lexer for code block language {token!r}, using plain text")
            return TextLexer()

    def block_code(self, code, info=None):
        return highlight(code, self.lexer_for(info), self.formatter)


class MarkdownRenderer:
    """Convert markdown bodies to HTML.

    One instance is built per render pass; the output depends only on the
    input text and the highlight theme.
    """

    def __init__(self, theme=DEFAULT_THEME):
        self.theme = theme
        self.markdown_parser = mistune.create_markdown(
            renderer=HighlightRenderer(theme),
            plugins=['table', 'task_lists', 'strikethrough']
        )

    def __call__(self, text):
        return self.markdown_parser(text)


_default_renderers = {}


def render_markdown(text, theme=DEFAULT_THEME):
    """Convert markdown text to HTML using a cached renderer for ``theme``."""
    renderer = _default_renderers.get(theme)
    if renderer is None:
        renderer = _default_renderers[theme] = MarkdownRenderer(theme)
    return renderer(text)
