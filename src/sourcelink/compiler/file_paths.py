"""
File path → identifier encoding for linked units.

Each module path maps to two reserved names: the unit (function) name and
the name of the variable holding the unit's invocation result.
"""

from ..shared.errors import SourceLinkImplementationError
from ..utils.config import (
    NON_ALPHANUMERIC_CHAR_ENCODING, RESULT_VARIABLE_PREFIX, RESULT_VARIABLE_SUFFIX,
    UNIT_NAME_PREFIX, UNIT_NAME_SUFFIX,
)


def _encode_char(ch: str) -> str:
    encoded = NON_ALPHANUMERIC_CHAR_ENCODING.get(ch)
    if encoded is not None:
        return encoded
    if ch.isascii() and ch.isalnum():
        return ch
    raise SourceLinkImplementationError(f"Unvalidated file path character {ch!r}")


def transform_file_path_to_valid_function_name(file_path: str) -> str:
    """
    '/dir/not-source.js' → '__$dir$not$$dash$$source$$dot$$js__'

    Injective over validated file paths.
    """
    encoded = "".join(_encode_char(ch) for ch in file_path)
    return f"{UNIT_NAME_PREFIX}{encoded}{UNIT_NAME_SUFFIX}"


def transform_function_name_to_invoked_function_result_variable_name(function_name: str) -> str:
    return f"{RESULT_VARIABLE_PREFIX}{function_name}{RESULT_VARIABLE_SUFFIX}"


def unit_result_variable_name(file_path: str) -> str:
    """Name of the variable bound to the result of invoking the unit for `file_path`"""
    return transform_function_name_to_invoked_function_result_variable_name(
        transform_file_path_to_valid_function_name(file_path)
    )


def _encode_library(library: str) -> str:
    return "".join(NON_ALPHANUMERIC_CHAR_ENCODING.get(ch, ch) for ch in library)


def library_import_alias(library: str, name: str) -> str:
    """Reserved local name a unit imports library export `name` under"""
    return f"${_encode_library(library)}${name}"


def library_namespace_alias(library: str) -> str:
    """
    Reserved local name for a library namespace.

    Ends in '$', which no export alias does.
    """
    return f"${_encode_library(library)}$"
