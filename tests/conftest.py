"""Test configuration and fixtures for Kalamos tests."""

import pytest
import tempfile
import shutil
from pathlib import Path

POST_LAYOUT = "<h1>{{title}}</h1><div>{{body}}</div>"

DEFAULT_LAYOUT = (
    "<title>{{ title }}</title>{{ body }}"
    "<ul>{% for post in posts %}<li>{{ post.title }}</li>{% endfor %}</ul>"
)

FIRST_POST = """+++
title = "First Post"
+++
This is my first post."""


def write(path, content):
    """Write ``content`` to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def site_dir(temp_dir):
    """Create a small site: two layouts, three posts, two pages and static files."""
    site = temp_dir / 'site'

    write(site / 'layouts' / 'post.html', POST_LAYOUT)
    write(site / 'layouts' / 'default.html', DEFAULT_LAYOUT)

    write(site / 'posts' / '2024-12-01-first.md', FIRST_POST)
    write(site / 'posts' / '2024-12-05-second.md', """+++
title = "Second Post"
+++
Teaser text.

<!--more-->

The rest of the second post.
""")
    write(site / 'posts' / '2023-01-01-old.md', """+++
title = "Old Post"
+++
An old post.
""")

    write(site / 'pages' / 'about.md', """+++
title = "About"
+++
About this site.
""")
    write(site / 'pages' / 'feed.xml', """+++
title = "Feed"
+++
<feed>{% for post in posts %}<entry>{{ post.url }}</entry>{% endfor %}</feed>""")

    write(site / 'assets' / 'css' / 'style.css', "body {\n    color: red;\n}\n")
    write(site / 'direct_copy' / 'robots.txt', "User-agent: *\n")

    return site


@pytest.fixture
def output_dir(temp_dir):
    """Output directory for a render pass; not created up front."""
    return temp_dir / 'output'
