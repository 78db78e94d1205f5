"""
Centralized file I/O utilities.

- Single place for encoding handling
- Use Path.read_text() consistently (no raw open/read)
"""

from pathlib import Path
from typing import Dict, Union

from .config import DEFAULT_FILE_ENCODING, PATH_SEPARATOR, SOURCE_FILE_EXTENSION


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=DEFAULT_FILE_ENCODING)


def to_module_key(path: Path, root: Path) -> str:
    """'/'-rooted module key of a file relative to the project root."""
    relative = path.resolve().relative_to(root.resolve())
    return PATH_SEPARATOR + relative.as_posix()


def read_source_tree(root: Union[Path, str], suffix: str = SOURCE_FILE_EXTENSION) -> Dict[str, str]:
    """
    Read every source file under root into a file table.

    Keys are absolute module keys ('/lib/util.js'), values are file contents.
    """
    root_path = Path(root).resolve()
    files: Dict[str, str] = {}
    for path in sorted(root_path.rglob(f"*{suffix}")):
        if path.is_file():
            files[to_module_key(path, root_path)] = read_source_file(path)
    return files
