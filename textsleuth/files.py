import os
from pathlib import Path
from typing import Generator, Iterable, Iterator

from .errors import InvalidConfiguration


def parse_extensions(text) -> tuple[str, ...]:
    """'sfd, .ADX,pvr' -> ('sfd', 'adx', 'pvr')"""
    if not text:
        return ()
    if not isinstance(text, str):
        text = ','.join(text)

    exts = []
    for ext in text.split(','):
        ext = ext.strip().lstrip('.').lower()
        if ext:
            exts.append(ext)
    return tuple(exts)


def ignored(path: Path, ignore: Iterable[str]) -> bool:
    name = path.name.lower()
    return any(name.endswith('.' + ext.lower()) for ext in ignore)


def walk_files(path: Path) -> Generator[Path, None, None]:
    try:
        subpaths = sorted(path.iterdir())
    except OSError:
        # unreadable subfolders are skipped, same as unreadable files
        return

    for subpath in subpaths:
        if subpath.is_file():
            yield subpath

        elif subpath.is_dir() and not subpath.is_symlink():
            yield from walk_files(subpath)


def enumerate_files(root, ignore: Iterable[str] = ()) -> Iterator[Path]:
    """
    Files to scan under root.

    A single file is returned as-is, even if its extension is on the ignore
    list. Folders are walked recursively in sorted order. Raises
    InvalidConfiguration straight away if root can't be read.
    """
    root = Path(root)
    ignore = tuple(ignore)

    if not root.exists() or not os.access(root, os.R_OK):
        raise InvalidConfiguration(f'cannot read specified search path: {root}')

    if root.is_file():
        return iter([root])

    return (path for path in walk_files(root) if not ignored(path, ignore))
