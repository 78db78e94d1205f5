"""
Tests for file path → unit name encoding.
"""

import pytest

from sourcelink.compiler.file_paths import (
    library_import_alias, library_namespace_alias, transform_file_path_to_valid_function_name,
    transform_function_name_to_invoked_function_result_variable_name, unit_result_variable_name,
)
from sourcelink.shared.errors import SourceLinkImplementationError


class TestFunctionNames:
    def test_dash_and_dot(self):
        assert transform_file_path_to_valid_function_name("/not-source-module.js") == (
            "__$not$$dash$$source$$dash$$module$$dot$$js__"
        )

    def test_nested_path_with_underscore(self):
        assert transform_file_path_to_valid_function_name("/dir/my_file.js") == "__$dir$my_file$$dot$$js__"

    def test_alphanumerics_unchanged(self):
        assert transform_file_path_to_valid_function_name("/Ab3") == "__$Ab3__"

    def test_injective_on_lookalike_paths(self):
        paths = ["/a.js", "/a-js", "/a/js", "/a_js", "/adotjs", "/a/.js"]
        names = {transform_file_path_to_valid_function_name(p) for p in paths}
        assert len(names) == len(paths)

    def test_unvalidated_path_is_an_internal_error(self):
        with pytest.raises(SourceLinkImplementationError):
            transform_file_path_to_valid_function_name("/a b.js")


class TestResultVariables:
    def test_result_variable(self):
        assert transform_function_name_to_invoked_function_result_variable_name("__$a$$dot$$js__") == (
            "___$a$$dot$$js___"
        )

    def test_unit_result_variable_name(self):
        assert unit_result_variable_name("/a.js") == "___$a$$dot$$js___"

    def test_library_alias(self):
        assert library_import_alias("math", "math_PI") == "$math$math_PI"

    def test_library_namespace_alias_differs_from_export_aliases(self):
        assert library_namespace_alias("math") == "$math$"
        assert not library_import_alias("math", "m").endswith("$")
