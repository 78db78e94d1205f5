"""
Tests for module specifier resolution and file path validation.
"""

import pytest

from sourcelink.analysis.module_system.path_resolver import (
    ConsecutiveSlashesInFilePathError, IllegalCharInFilePathError, ModuleNotFoundError,
    PathResolver, is_local_specifier, normalize_module_path, validate_file_path,
)
from sourcelink.shared.source_location import SourceLocation


class TestLocalSpecifiers:
    @pytest.mark.parametrize("specifier", ["/a.js", "./a.js", "../a.js"])
    def test_local(self, specifier):
        assert is_local_specifier(specifier)

    @pytest.mark.parametrize("specifier", ["math", "rune", "a.js", ".hidden"])
    def test_library(self, specifier):
        assert not is_local_specifier(specifier)


class TestNormalize:
    def test_relative_sibling(self):
        assert normalize_module_path("/dir/a.js", "./b.js") == "/dir/b.js"

    def test_parent_directory(self):
        assert normalize_module_path("/dir/a.js", "../b.js") == "/b.js"

    def test_absolute(self):
        assert normalize_module_path("/dir/a.js", "/lib/c.js") == "/lib/c.js"

    def test_dot_segments_collapse(self):
        assert normalize_module_path("/x/y/a.js", "./../z/./c.js") == "/x/z/c.js"

    def test_parent_above_root_stays_at_root(self):
        assert normalize_module_path("/a.js", "../../b.js") == "/b.js"

    def test_two_specifiers_one_key(self):
        assert normalize_module_path("/dir/a.js", "./shared.js") == normalize_module_path("/b.js", "./dir/shared.js")


class TestValidation:
    def test_valid_path(self):
        validate_file_path("./dir-1/file_name.v2.js")

    def test_illegal_char(self):
        with pytest.raises(IllegalCharInFilePathError) as exc_info:
            validate_file_path("./fi le.js")
        assert exc_info.value.message == (
            "File path './fi le.js' must only contain alphanumeric chars and/or '_', '/', '.', '-'."
        )
        assert exc_info.value.error_code == "E0434"

    def test_dollar_is_illegal(self):
        with pytest.raises(IllegalCharInFilePathError):
            validate_file_path("./a$b.js")

    def test_consecutive_slashes(self):
        with pytest.raises(ConsecutiveSlashesInFilePathError) as exc_info:
            validate_file_path("./dir//a.js")
        assert exc_info.value.message == "File path './dir//a.js' cannot contain consecutive slashes '//'."


class TestPathResolver:
    def test_library_specifier_unchanged(self):
        resolver = PathResolver({"/main.js"})
        assert resolver.resolve("/main.js", "math") == "math"

    def test_existing_file(self):
        resolver = PathResolver({"/main.js", "/lib/util.js"})
        assert resolver.resolve("/main.js", "./lib/util.js") == "/lib/util.js"

    def test_missing_file(self):
        resolver = PathResolver({"/main.js"})
        location = SourceLocation("/main.js", 1, 19)
        with pytest.raises(ModuleNotFoundError) as exc_info:
            resolver.resolve("/main.js", "./x.js", location)
        assert exc_info.value.message == "Module './x.js' not found."
        assert exc_info.value.location == location

    def test_extension_fallback(self):
        resolver = PathResolver({"/main.js", "/util.js"}, resolve_extensions=(".js",))
        assert resolver.resolve("/main.js", "./util") == "/util.js"

    def test_exact_match_preferred_over_extension(self):
        resolver = PathResolver({"/util", "/util.js"}, resolve_extensions=(".js",))
        assert resolver.resolve("/main.js", "./util") == "/util"

    def test_directory_index(self):
        resolver = PathResolver({"/main.js", "/lib/index.js"}, resolve_directories=True)
        assert resolver.resolve("/main.js", "./lib") == "/lib/index.js"

    def test_directory_index_disabled_by_default(self):
        resolver = PathResolver({"/main.js", "/lib/index.js"})
        with pytest.raises(ModuleNotFoundError):
            resolver.resolve("/main.js", "./lib")

    def test_invalid_path_checked_before_lookup(self):
        resolver = PathResolver({"/main.js"})
        with pytest.raises(ConsecutiveSlashesInFilePathError):
            resolver.resolve("/main.js", ".//main.js")
