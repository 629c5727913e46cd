"""
Derive slugs, output paths and URLs from source paths.

Resolution never reads the file: it is a pure function of the relative
source path and the content kind.
"""

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path, PurePosixPath

from .errors import DateParseError, PathResolutionError

HTML_EXTENSION = 'html'
MARKDOWN_EXTENSIONS = ('md', 'markdown')


def _extension(path):
    return path.suffix[1:] if path.suffix else ''


def _url_for(output_path):
    return '/' + PurePosixPath(*output_path.parts).as_posix()


@dataclass(frozen=True)
class ContentFile:
    """Metadata derived from a source path."""

    input_path: Path
    output_path: Path
    url: str
    slug: str
    extension: str

    @property
    def is_markdown(self):
        return self.extension in MARKDOWN_EXTENSIONS


@dataclass(frozen=True)
class PageFile(ContentFile):
    READ_DIR = 'pages'
    VALID_EXTENSIONS = MARKDOWN_EXTENSIONS + ('html', 'xml')

    @classmethod
    def from_path(cls, path, base_dir=READ_DIR):
        """
        Resolve a page source path.

        ``path`` is relative to the site root; the leading ``base_dir`` is
        dropped from the output path so ``pages/about.md`` becomes
        ``about.html``. Markdown pages are written as ``.html``, ``html`` and
        ``xml`` pages keep their extension.
        """
        path = Path(path)
        extension = _extension(path)
        if extension not in cls.VALID_EXTENSIONS:
            raise PathResolutionError(
                f"Unsupported page extension {extension!r}, expected one of {', '.join(cls.VALID_EXTENSIONS)}",
                path,
            )

        relative = path
        if base_dir is not None and path.is_relative_to(base_dir):
            relative = path.relative_to(base_dir)

        if extension in MARKDOWN_EXTENSIONS:
            output_path = relative.with_suffix('.' + HTML_EXTENSION)
        else:
            output_path = relative

        return cls(
            input_path=path,
            output_path=output_path,
            url=_url_for(output_path),
            slug=path.stem,
            extension=extension,
        )


@dataclass(frozen=True)
class PostFile(ContentFile):
    date: date

    READ_DIR = 'posts'
    VALID_EXTENSIONS = MARKDOWN_EXTENSIONS

    @classmethod
    def from_path(cls, path):
        """
        Resolve a post source path named ``YYYY-MM-DD-slug.md``.

        Posts are written to ``{year}/{month}/{slug}.html`` regardless of the
        directory they are read from. The month is not zero padded.
        """
        path = Path(path)
        extension = _extension(path)
        if extension not in cls.VALID_EXTENSIONS:
            raise PathResolutionError(
                f"Unsupported post extension {extension!r}, expected one of {', '.join(cls.VALID_EXTENSIONS)}",
                path,
            )

        parts = path.stem.split('-')
        if len(parts) < 4:
            raise PathResolutionError("Post filename must look like YYYY-MM-DD-slug", path)
        slug = '-'.join(parts[3:])
        if not slug:
            raise PathResolutionError("Post filename has an empty slug", path)

        date_string = '-'.join(parts[:3])
        try:
            post_date = datetime.strptime(date_string, '%Y-%m-%d').date()
        except ValueError as e:
            raise DateParseError(date_string, path) from e

        output_path = Path(str(post_date.year), str(post_date.month), f"{slug}.{HTML_EXTENSION}")
        return cls(
            input_path=path,
            output_path=output_path,
            url=_url_for(output_path),
            slug=slug,
            extension=extension,
            date=post_date,
        )
