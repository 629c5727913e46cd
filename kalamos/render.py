"""
The render pass: turn a site root into a complete output tree.

A pass is linear and strict. Posts are assembled first so that every post
and page can list them, then posts and pages are rendered, then static
directories are copied through. Any error aborts the whole pass. Nothing
from a previous pass is removed.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound
from jinja2 import TemplateError as JinjaTemplateError

from .content import Page, Post
from .errors import TemplateLoadError
from .markdown import MarkdownRenderer
from .paths import PageFile, PostFile
from .settings import RenderConfig
from .util import copy_dir, ensure_dir, minify_assets, read_text, walk_files


class LayoutLoader(FileSystemLoader):
    """Load only the top-level ``*.html`` files of the layouts directory."""

    def __init__(self, layouts_dir):
        super().__init__(str(layouts_dir))
        layouts_dir = Path(layouts_dir)
        self.layouts = []
        if layouts_dir.is_dir():
            self.layouts = sorted(path for path in layouts_dir.glob('*.html') if path.is_file())
        self.names = [layout.name for layout in self.layouts]

    def get_source(self, environment, template):
        if template not in self.names:
            raise TemplateNotFound(template)
        return super().get_source(environment, template)

    def list_templates(self):
        return list(self.names)


@dataclass
class RenderResult:
    """Files written by one render pass."""

    posts: List[Path] = field(default_factory=list)
    pages: List[Path] = field(default_factory=list)
    copied: List[Path] = field(default_factory=list)
    minified: List[Path] = field(default_factory=list)


class Kalamos:
    """Render a site root into an output directory.

    Instances hold no state between passes; calling ``render`` twice
    re-reads and re-renders everything. Concurrent calls against the same
    output directory are not synchronized and must be serialized by the
    caller.
    """

    def __init__(self, input_dir, output_dir, config=None):
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.config = config or RenderConfig()
        self.logger = logging.getLogger('Kalamos')

    def load_templates(self):
        """Build the template environment and compile every ``layouts/*.html`` file."""
        layouts_dir = self.input_dir / self.config.layouts_dir
        loader = LayoutLoader(layouts_dir)
        env = Environment(loader=loader, undefined=StrictUndefined, keep_trailing_newline=True)

        if not layouts_dir.is_dir():
            self.logger.warning(f"Layouts directory not found: {layouts_dir}")
            return env

        for layout in loader.layouts:
            try:
                env.get_template(layout.name)
            except JinjaTemplateError as e:
                raise TemplateLoadError(f"Failed to load template ({e})", layout) from e
            self.logger.debug(f"Loaded template: {layout.name}")
        return env

    def _source_files(self, directory):
        """Yield source paths under ``directory`` relative to the site root."""
        root = self.input_dir / directory
        if not root.is_dir():
            self.logger.debug(f"Content directory not found, skipping: {root}")
            return
        for path in walk_files(root):
            yield path.relative_to(self.input_dir)

    def load_posts(self, markdown):
        """Assemble all posts, most recent first."""
        posts = []
        for relative_path in self._source_files(self.config.posts_dir):
            post_file = PostFile.from_path(relative_path)
            text = read_text(self.input_dir / relative_path)
            posts.append(Post.from_content(post_file, text, markdown))
        # Stable: posts sharing a date keep their path order
        posts.sort(key=lambda post: post.date, reverse=True)
        return posts

    def load_pages(self, markdown):
        pages = []
        for relative_path in self._source_files(self.config.pages_dir):
            page_file = PageFile.from_path(relative_path, base_dir=self.config.pages_dir)
            text = read_text(self.input_dir / relative_path)
            pages.append(Page.from_content(page_file, text, markdown))
        return pages

    def copy_static(self):
        """Copy the pass-through directories into the output tree."""
        copied = []
        for source, destination in self.config.copy_dirs.items():
            source_dir = self.input_dir / source
            if not source_dir.is_dir():
                self.logger.debug(f"Copy directory not found, skipping: {source_dir}")
                continue
            copied.extend(copy_dir(source_dir, self.output_dir / destination))
            self.logger.debug(f"Copied {source_dir} to {self.output_dir / destination}")
        return copied

    def render(self):
        """
        Run one full render pass.

        Returns:
            RenderResult listing every file written

        Raises:
            KalamosError: Any failure; the pass stops at the first one
        """
        start_time = time.time()
        self.logger.info(f"Rendering {self.input_dir} to {self.output_dir}")
        result = RenderResult()

        env = self.load_templates()
        markdown = MarkdownRenderer(self.config.highlight_theme)
        ensure_dir(self.output_dir)

        posts = self.load_posts(markdown)
        listing = tuple(post.to_context() for post in posts)
        for post in posts:
            result.posts.append(post.render(env, self.output_dir, listing))

        for page in self.load_pages(markdown):
            result.pages.append(page.render(env, self.output_dir, listing))

        result.copied = self.copy_static()
        if self.config.minify:
            result.minified = minify_assets(result.copied)

        self.logger.info(f"Render completed in {time.time() - start_time:.6f} seconds.")
        self.logger.info(f"Total posts rendered: {len(result.posts)}")
        self.logger.info(f"Total pages rendered: {len(result.pages)}")
        self.logger.info(f"Total files copied: {len(result.copied)}")
        if self.config.minify:
            self.logger.info(f"Total files minified: {len(result.minified)}")
        return result


def render_dir(input_dir, output_dir, config=None):
    """Render the site at ``input_dir`` into ``output_dir``."""
    return Kalamos(input_dir, output_dir, config).render()
