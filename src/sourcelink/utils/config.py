"""
Configuration constants to replace magic strings throughout sourcelink
"""

import os
import tempfile

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "sourcelink_parser.cache")
DEFAULT_SOURCE_FILE = "main.js"
SOURCE_FILE_EXTENSION = ".js"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Module resolution constants
PATH_SEPARATOR = "/"
ROOT_PATH = "/"
LOCAL_SPECIFIER_PREFIXES = ("/", "./", "../")
DIRECTORY_INDEX_FILE = "index.js"

# File path -> identifier encoding. Alphanumeric chars map to themselves.
# '$' cannot appear in user identifiers, so every encoded name is reserved.
# '$$' only comes from '.' or '-' because '//' is rejected in file paths.
NON_ALPHANUMERIC_CHAR_ENCODING = {
    "_": "_",
    "/": "$",
    ".": "$$dot$$",
    "-": "$$dash$$",
}
UNIT_NAME_PREFIX = "__"
UNIT_NAME_SUFFIX = "__"
RESULT_VARIABLE_PREFIX = "_"
RESULT_VARIABLE_SUFFIX = "_"

# Prelude names used by linked programs
ACCESS_EXPORT_FUNCTION_NAME = "__access_export__"
ACCESS_NAMED_EXPORT_FUNCTION_NAME = "__access_named_export__"
DEFAULT_EXPORT_LOOKUP_NAME = "default"
PAIR_FUNCTION_NAME = "pair"
LIST_FUNCTION_NAME = "list"

# Library registry: simulated fetch latency in seconds
LIBRARY_FETCH_DELAY = 0.0
