"""
Exception taxonomy for Kalamos.

Every failure in a render pass surfaces as a subclass of KalamosError and
aborts the pass. Errors that relate to a file carry it as ``path``.
"""


class KalamosError(Exception):
    """Base class for all Kalamos errors."""

    def __init__(self, message, path=None):
        self.path = path
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)


class ConfigError(KalamosError):
    """Site settings could not be loaded or are invalid."""


class FrontmatterError(KalamosError):
    """The frontmatter block of a document could not be extracted."""

    def with_path(self, path):
        """Return a copy of this error that names the offending file."""
        return type(self)(self.detail, path=path)


class InvalidFrontmatterError(FrontmatterError):
    def __init__(self, detail, path=None):
        self.detail = detail
        super().__init__(f"Invalid frontmatter ({detail})", path)


class ContentBeforeFrontmatterError(FrontmatterError):
    def __init__(self, detail, path=None):
        self.detail = detail
        super().__init__(f"Content before frontmatter ({detail.strip()!r})", path)


class PathResolutionError(KalamosError):
    """A source path does not follow the naming rules of its content kind."""


class DateParseError(PathResolutionError):
    def __init__(self, date_string, path=None):
        self.date_string = date_string
        super().__init__(f"Invalid date {date_string!r}, expected YYYY-MM-DD", path)


class SchemaError(KalamosError):
    """Frontmatter does not match the schema of its content kind."""


class MissingFieldError(SchemaError):
    def __init__(self, field, path=None):
        self.field = field
        super().__init__(f"Missing required frontmatter field {field!r}", path)


class FileError(KalamosError):
    """An I/O operation on a file or directory failed."""


class ReadFileError(FileError):
    def __init__(self, path):
        super().__init__("Failed to read file", path)


class WriteFileError(FileError):
    def __init__(self, path):
        super().__init__("Failed to write file", path)


class CreateDirError(FileError):
    def __init__(self, path):
        super().__init__("Failed to create directory", path)


class TemplateError(KalamosError):
    """The template engine failed."""


class TemplateLoadError(TemplateError):
    pass


class TemplateRenderError(TemplateError):
    pass
