#!/usr/bin/env python3
"""
Command-line interface for Kalamos - static site generator.
"""

import argparse
import logging
import os
import sys
from datetime import date, datetime
from typing import List, Optional

from . import __version__
from .errors import KalamosError
from .render import render_dir
from .server import serve
from .settings import KalamosSettings

SAMPLE_LAYOUTS = {
    'default.html': """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ title }}</title>
    <link rel="stylesheet" href="/assets/css/style.css">
</head>
<body>
    <main>
        {% block content %}
        <h1>{{ title }}</h1>
        {{ body }}
        {% endblock %}
    </main>
</body>
</html>
""",
    'post.html': """{% extends "default.html" %}
{% block content %}
<article>
    <h1>{{ title }}</h1>
    <time datetime="{{ date_str }}">{{ date_str }}</time>
    {{ body }}
</article>
{% endblock %}
""",
}

SAMPLE_INDEX_PAGE = """+++
title = "Home"
+++
{% extends "default.html" %}
{% block content %}
<h1>{{ title }}</h1>
<ul>
{% for post in posts %}
    <li>
        <a href="{{ post.url }}">{{ post.title }}</a> <time>{{ post.date_str }}</time>
        {{ post.excerpt }}
    </li>
{% endfor %}
</ul>
{% endblock %}
"""

SAMPLE_POST = """+++
title = "Welcome to Your New Site"
+++
Congratulations! Your site is built with **Kalamos**.

<!--more-->

Posts live in `posts/` and are named `YYYY-MM-DD-slug.md`. Code blocks are
highlighted:

```python
def hello():
    print("Hello, world!")
```
"""

SAMPLE_STYLESHEET = """body {
    font-family: sans-serif;
    max-width: 40rem;
    margin: 0 auto;
}
"""


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno > logging.INFO:
            return True
        allowed_messages = [
            "Render completed in",
            "Total posts rendered:",
            "Total pages rendered:",
            "Total files copied:",
            "Total files minified:",
            "Serving",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Set up logging configuration."""
    logger = logging.getLogger('Kalamos')
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        # Console handler with filter
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        if not verbose:
            console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        # File handler for all logs
        logs_dir = os.path.join(os.getcwd(), 'logs')
        os.makedirs(logs_dir, exist_ok=True)
        log_filename = datetime.now().strftime('kalamos_%Y-%m-%d_%H-%M-%S.log')
        file_handler = logging.FileHandler(os.path.join(logs_dir, log_filename))
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logger.addHandler(file_handler)

    return logger


def _write_if_missing(path: str, content: str, label: str) -> None:
    if os.path.exists(path):
        print(f"{label} already exists: {path}")
        return
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
    print(f"Created {label.lower()}: {path}")


def create_starter_structure(site_dir: str) -> None:
    """Create a starter site with layouts, a post, an index page and a stylesheet."""
    directories = ['layouts', 'posts', 'pages', os.path.join('assets', 'css'), 'direct_copy']

    for directory in directories:
        dir_path = os.path.join(site_dir, directory)
        if os.path.exists(dir_path):
            print(f"Directory already exists: {directory}")
        else:
            os.makedirs(dir_path, exist_ok=True)
            print(f"Created directory: {directory}")

    for name, content in SAMPLE_LAYOUTS.items():
        _write_if_missing(os.path.join(site_dir, 'layouts', name), content, 'Layout')

    post_name = f"{date.today().isoformat()}-welcome.md"
    _write_if_missing(os.path.join(site_dir, 'posts', post_name), SAMPLE_POST, 'Post')
    _write_if_missing(os.path.join(site_dir, 'pages', 'index.html'), SAMPLE_INDEX_PAGE, 'Page')
    _write_if_missing(os.path.join(site_dir, 'assets', 'css', 'style.css'), SAMPLE_STYLESHEET, 'Stylesheet')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Kalamos - Static Site Generator')
    parser.add_argument('--path', type=str,
                        help='Site root containing layouts/, posts/ and pages/')
    parser.add_argument('--output', type=str,
                        help='Output directory for the rendered site')
    parser.add_argument('--highlight-theme', type=str,
                        help='Pygments style used for code blocks')
    parser.add_argument('--minify', action='store_true', default=None,
                        help='Write minified copies of CSS and JS assets')
    parser.add_argument('--serve', action='store_true',
                        help='Serve the output directory after rendering')
    parser.add_argument('--host', type=str, help='Host for --serve')
    parser.add_argument('--port', type=int, help='Port for --serve')
    parser.add_argument('--verbose', action='store_true',
                        help='Show all log messages in the console')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json', 'toml'],
                        help='Create a sample configuration file and starter site')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    site_dir = args.path or os.getcwd()

    try:
        # Handle init command
        if args.init:
            config_path = KalamosSettings(site_dir).create_sample_config(args.init)
            print(f"Created sample configuration file: {config_path}")
            print("\nCreating starter site structure...")
            create_starter_structure(site_dir)
            print("\nYour new Kalamos site is ready!")
            print("Edit the layouts and content, then run 'kalamos' to render your site.")
            return

        setup_logging(args.verbose)

        # Load settings from configuration file
        settings_loader = KalamosSettings(site_dir)
        settings_loader.load_settings()

        # Command line arguments take precedence
        args_dict = {
            'output': args.output,
            'highlight_theme': args.highlight_theme,
            'minify': args.minify,
            'host': args.host,
            'port': args.port,
        }
        final_settings = settings_loader.merge_with_args(args_dict)

        output_dir = os.path.expanduser(final_settings['output'])
        if not os.path.isabs(output_dir):
            output_dir = os.path.join(site_dir, output_dir)

        render_dir(site_dir, output_dir, KalamosSettings.to_render_config(final_settings))

        if args.serve:
            serve(output_dir, final_settings['host'], int(final_settings['port']))
    except (KalamosError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
