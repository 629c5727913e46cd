"""
Kalamos - a small static site generator.

Kalamos reads posts and pages written in Markdown (or HTML/XML templates)
with TOML frontmatter, renders them through Jinja2 layouts and writes a
static site. Every post and page can list all posts, newest first.
"""

__version__ = "0.1.0"

from .content import Page, Post
from .parser import Document, parse
from .paths import PageFile, PostFile
from .render import Kalamos, RenderResult, render_dir
from .settings import KalamosSettings, RenderConfig

__all__ = [
    'Document', 'Kalamos', 'KalamosSettings', 'Page', 'PageFile', 'Post',
    'PostFile', 'RenderConfig', 'RenderResult', 'parse', 'render_dir',
]
