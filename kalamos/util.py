"""
Filesystem helpers shared by the render pass.
"""

import shutil
from pathlib import Path

import csscompressor
import rjsmin

from .errors import CreateDirError, PathResolutionError, ReadFileError, WriteFileError


def ensure_dir(directory):
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CreateDirError(directory) from e


def read_text(path):
    try:
        return path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFileError(path) from e


def write_text(path, text):
    """Write ``text`` to ``path``, creating parent directories as needed."""
    ensure_dir(path.parent)
    try:
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise WriteFileError(path) from e


def walk_files(directory):
    """Yield regular files under ``directory`` in sorted order, skipping everything else."""
    for path in sorted(Path(directory).rglob('*')):
        if path.is_file():
            yield path


def copy_dir(src, dst):
    """
    Copy every regular file under ``src`` to the same relative location under ``dst``.

    Existing files in ``dst`` are overwritten, nothing is removed.

    Returns:
        List of destination paths that were written
    """
    src = Path(src)
    dst = Path(dst)
    if not src.is_dir():
        raise PathResolutionError("Copy source is not a directory", src)
    ensure_dir(dst)

    copied = []
    for path in walk_files(src):
        target = dst / path.relative_to(src)
        ensure_dir(target.parent)
        try:
            shutil.copyfile(path, target)
        except OSError as e:
            raise WriteFileError(target) from e
        copied.append(target)
    return copied


def minify_assets(paths):
    """
    Write ``.min.css`` and ``.min.js`` siblings for the stylesheets and scripts in ``paths``.

    The copied source files are left untouched.

    Returns:
        List of minified files that were written
    """
    written = []
    for path in paths:
        name = path.name
        if name.endswith('.css') and not name.endswith('.min.css'):
            minified = csscompressor.compress(read_text(path))
            target = path.with_name(name[:-len('.css')] + '.min.css')
        elif name.endswith('.js') and not name.endswith('.min.js'):
            minified = rjsmin.jsmin(read_text(path))
            target = path.with_name(name[:-len('.js')] + '.min.js')
        else:
            continue
        write_text(target, minified)
        written.append(target)
    return written
