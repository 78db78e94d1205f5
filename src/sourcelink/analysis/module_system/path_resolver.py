"""
Module Path Resolution

Pure path resolution for import specifiers.

Rust Pattern: rustc_resolve::module::PathResolution

- './x.js', '../x.js', '/x.js' → local module (canonical absolute key)
- anything else ('math', 'rune') → library module, key is the bare name
"""

import logging
import posixpath
import re
from typing import Collection, Optional, Sequence

from ...shared.errors import SourceLinkSourceError
from ...shared.source_location import SourceLocation
from ...utils.config import (
    DIRECTORY_INDEX_FILE, LOCAL_SPECIFIER_PREFIXES, NON_ALPHANUMERIC_CHAR_ENCODING,
    PATH_SEPARATOR, ROOT_PATH,
)

logger = logging.getLogger(__name__)

_VALID_FILE_PATH = re.compile(
    "^[A-Za-z0-9" + "".join(re.escape(ch) for ch in NON_ALPHANUMERIC_CHAR_ENCODING) + "]*$"
)


class ModuleNotFoundError(SourceLinkSourceError):
    """Raised when a local import specifier does not name a file in the link input"""
    error_code = "E0432"
    category = "resolution"
    help_text = "check that the module file path resolves to an existing file"

    def __init__(self, specifier: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Module '{specifier}' not found.", location)
        self.specifier = specifier


class InvalidFilePathError(SourceLinkSourceError):
    """Base class for malformed local specifiers"""
    category = "resolution"

    def __init__(self, message: str, file_path: str, location: Optional[SourceLocation] = None):
        super().__init__(message, location)
        self.file_path = file_path


class IllegalCharInFilePathError(InvalidFilePathError):
    error_code = "E0434"
    help_text = "rename the offending file path to only use valid chars"

    def __init__(self, file_path: str, location: Optional[SourceLocation] = None):
        valid_chars = ", ".join(f"'{ch}'" for ch in NON_ALPHANUMERIC_CHAR_ENCODING)
        super().__init__(
            f"File path '{file_path}' must only contain alphanumeric chars and/or {valid_chars}.",
            file_path, location,
        )


class ConsecutiveSlashesInFilePathError(InvalidFilePathError):
    error_code = "E0435"
    help_text = "remove consecutive slashes from the offending file path"

    def __init__(self, file_path: str, location: Optional[SourceLocation] = None):
        super().__init__(
            f"File path '{file_path}' cannot contain consecutive slashes '//'.",
            file_path, location,
        )


def is_local_specifier(specifier: str) -> bool:
    """Local specifiers are absolute or relative file paths"""
    return specifier.startswith(LOCAL_SPECIFIER_PREFIXES)


def validate_file_path(file_path: str, location: Optional[SourceLocation] = None) -> None:
    """
    Reject file paths that cannot be turned into unit names.

    Raises:
        IllegalCharInFilePathError: char outside [A-Za-z0-9/._-]
        ConsecutiveSlashesInFilePathError: '//' anywhere in the path
    """
    if not _VALID_FILE_PATH.match(file_path):
        raise IllegalCharInFilePathError(file_path, location)
    if PATH_SEPARATOR * 2 in file_path:
        raise ConsecutiveSlashesInFilePathError(file_path, location)


def normalize_module_path(importer: str, specifier: str) -> str:
    """
    Canonical absolute path of `specifier` as seen from module `importer`.

    Examples:
        normalize_module_path('/dir/a.js', './b.js')    → '/dir/b.js'
        normalize_module_path('/dir/a.js', '../b.js')   → '/b.js'
        normalize_module_path('/dir/a.js', '/lib/c.js') → '/lib/c.js'
    """
    if specifier.startswith(PATH_SEPARATOR):
        joined = specifier
    else:
        joined = posixpath.join(posixpath.dirname(importer) or ROOT_PATH, specifier)
    normalized = posixpath.normpath(joined)
    # '..' above the root stays at the root
    if not normalized.startswith(PATH_SEPARATOR):
        normalized = ROOT_PATH + normalized
    return normalized


class PathResolver:
    """
    Resolves import specifiers against the set of files in the link input.

    This class is stateless apart from its configuration and can be shared.

    Args:
        files: absolute module keys available for linking
        resolve_extensions: suffixes tried when the specifier itself is not a file
        resolve_directories: also try '<path>/index.js'
    """

    def __init__(self, files: Collection[str],
                 resolve_extensions: Sequence[str] = (),
                 resolve_directories: bool = False):
        self.files = files
        self.resolve_extensions = tuple(resolve_extensions)
        self.resolve_directories = resolve_directories

    def resolve(self, importer: str, specifier: str, location: Optional[SourceLocation] = None) -> str:
        """
        Resolve a specifier to a module key.

        Library specifiers are returned unchanged; local specifiers are
        validated, normalized and checked against the file table.

        Raises:
            ModuleNotFoundError: no file matches the local specifier
            IllegalCharInFilePathError, ConsecutiveSlashesInFilePathError
        """
        if not is_local_specifier(specifier):
            return specifier

        validate_file_path(specifier, location)
        base = normalize_module_path(importer, specifier)
        for candidate in self._candidates(base):
            if candidate in self.files:
                logger.debug(f"PathResolver: {importer}: '{specifier}' → {candidate}")
                return candidate
        raise ModuleNotFoundError(specifier, location)

    def _candidates(self, base: str):
        yield base
        for ext in self.resolve_extensions:
            yield base + ext
        if self.resolve_directories:
            yield posixpath.join(base, DIRECTORY_INDEX_FILE)
