"""
Posts and pages: assembling parsed documents into renderable entries.

Both kinds share one flat interface:

    from_content(content_file, text)  build the entry from path metadata and raw text
    to_context()                      the template variables for the entry
    render(env, output_dir, posts)    render through the environment and write it

Per-kind differences live in class constants (read directory, valid
extensions, default template).
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import TemplateError as JinjaTemplateError

from .errors import FrontmatterError, MissingFieldError, SchemaError, TemplateRenderError
from .markdown import render_markdown
from .parser import extract_frontmatter, parse
from .paths import PageFile, PostFile
from .util import write_text

TEMPLATE_SUFFIX = '.html'

logger = logging.getLogger('Kalamos.content')


def _parse_document(content_file, text, markdown):
    try:
        return parse(text, markdown)
    except FrontmatterError as e:
        raise e.with_path(content_file.input_path) from e


def _read_schema(frontmatter, default_template, path):
    """Decode the fields every content kind recognizes."""
    title = frontmatter.get('title')
    if title is None:
        raise MissingFieldError('title', path)
    if not isinstance(title, str):
        raise SchemaError("Frontmatter field 'title' must be a string", path)

    template = frontmatter.get('template', default_template)
    if not isinstance(template, str):
        raise SchemaError("Frontmatter field 'template' must be a string", path)

    variables = frontmatter.get('vars', {})
    if not isinstance(variables, dict):
        raise SchemaError("Frontmatter field 'vars' must be a table", path)

    return title, template + TEMPLATE_SUFFIX, variables


def render_template(env, template_name, context, path):
    """Render a named template, reporting failures against the source ``path``."""
    try:
        return env.get_template(template_name).render(**context)
    except JinjaTemplateError as e:
        raise TemplateRenderError(f"Failed to render template {template_name!r} ({e})", path) from e
    except Exception as e:
        # Runtime failures inside template expressions, such as a TypeError
        raise TemplateRenderError(f"Failed to render template {template_name!r} ({type(e).__name__}: {e})", path) from e


@dataclass(frozen=True)
class Post:
    file: PostFile
    title: str
    template_name: str
    content_html: str
    excerpt_html: Optional[str] = None
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    variables: Dict[str, Any] = field(default_factory=dict)

    READ_DIR = PostFile.READ_DIR
    VALID_EXTENSIONS = PostFile.VALID_EXTENSIONS
    DEFAULT_TEMPLATE = 'post'

    @classmethod
    def from_content(cls, post_file, text, markdown=render_markdown):
        document = _parse_document(post_file, text, markdown)
        title, template_name, variables = _read_schema(
            document.frontmatter, cls.DEFAULT_TEMPLATE, post_file.input_path
        )
        return cls(
            file=post_file,
            title=title,
            template_name=template_name,
            content_html=document.body_html,
            excerpt_html=document.excerpt_html,
            frontmatter=document.frontmatter,
            variables=variables,
        )

    @property
    def slug(self) -> str:
        return self.file.slug

    @property
    def url(self) -> str:
        return self.file.url

    @property
    def output_path(self) -> Path:
        return self.file.output_path

    @property
    def date(self) -> date:
        return self.file.date

    @property
    def date_string(self) -> str:
        return self.file.date.isoformat()

    def to_context(self):
        return {
            'title': self.title,
            'path': self.output_path.as_posix(),
            'output_path': self.output_path.as_posix(),
            'url': self.url,
            'body': self.content_html,
            'slug': self.slug,
            'date': self.date,
            'date_str': self.date_string,
            'excerpt': self.excerpt_html if self.excerpt_html is not None else self.content_html,
            'template': self.template_name,
            'vars': self.variables,
            'metadata': self.frontmatter,
        }

    def render(self, env, output_dir, posts):
        """Render this post with the shared ``posts`` listing and write it under ``output_dir``."""
        context = self.to_context()
        context['posts'] = posts
        html = render_template(env, self.template_name, context, self.file.input_path)
        output_path = Path(output_dir) / self.output_path
        write_text(output_path, html)
        logger.debug(f"Rendered post {self.file.input_path} -> {output_path}")
        return output_path


@dataclass(frozen=True)
class Page:
    file: PageFile
    title: str
    template_name: str
    content_html: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    variables: Dict[str, Any] = field(default_factory=dict)

    READ_DIR = PageFile.READ_DIR
    VALID_EXTENSIONS = PageFile.VALID_EXTENSIONS
    DEFAULT_TEMPLATE = 'default'

    @classmethod
    def from_content(cls, page_file, text, markdown=render_markdown):
        """
        Build a page from its resolved path and raw text.

        Markdown pages have their body converted to HTML. ``html`` and ``xml``
        pages keep their body as is, since it is rendered as a template of
        its own.
        """
        if page_file.is_markdown:
            document = _parse_document(page_file, text, markdown)
            frontmatter, content = document.frontmatter, document.body_html
        else:
            try:
                frontmatter, content = extract_frontmatter(text)
            except FrontmatterError as e:
                raise e.with_path(page_file.input_path) from e

        title, template_name, variables = _read_schema(
            frontmatter, cls.DEFAULT_TEMPLATE, page_file.input_path
        )
        return cls(
            file=page_file,
            title=title,
            template_name=template_name,
            content_html=content,
            frontmatter=frontmatter,
            variables=variables,
        )

    @property
    def slug(self) -> str:
        return self.file.slug

    @property
    def url(self) -> str:
        return self.file.url

    @property
    def output_path(self) -> Path:
        return self.file.output_path

    def to_context(self):
        return {
            'title': self.title,
            'path': self.output_path.as_posix(),
            'output_path': self.output_path.as_posix(),
            'url': self.url,
            'body': self.content_html,
            'slug': self.slug,
            'vars': self.variables,
            'metadata': self.frontmatter,
        }

    def render(self, env, output_dir, posts):
        """Render this page with the shared ``posts`` listing and write it under ``output_dir``."""
        context = self.to_context()
        context['posts'] = posts
        if self.file.is_markdown:
            html = render_template(env, self.template_name, context, self.file.input_path)
        else:
            html = self.render_own_template(env, context)
        output_path = Path(output_dir) / self.output_path
        write_text(output_path, html)
        logger.debug(f"Rendered page {self.file.input_path} -> {output_path}")
        return output_path

    def render_own_template(self, env, context):
        # Compiled against env so the page can extend layouts, but never added to it
        try:
            template = env.from_string(self.content_html)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateRenderError(f"Failed to render page template ({e})", self.file.input_path) from e
        except Exception as e:
            raise TemplateRenderError(
                f"Failed to render page template ({type(e).__name__}: {e})", self.file.input_path
            ) from e
