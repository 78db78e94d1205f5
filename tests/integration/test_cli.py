"""
CLI tests: link and run a project directory through `sourcelink.__main__.main`.
"""

import pytest

from sourcelink.__main__ import main
from sourcelink.utils.io_utils import read_source_tree

pytestmark = pytest.mark.integration


@pytest.fixture
def project(tmp_path):
    (tmp_path / "lib").mkdir()
    (tmp_path / "main.js").write_text('import { sq } from "./lib/sq.js";\ndisplay("hi");\nsq(4);\n')
    (tmp_path / "lib" / "sq.js").write_text("export function sq(x) { return x * x; }\n")
    return tmp_path


def test_read_source_tree(project):
    files = read_source_tree(project)
    assert sorted(files) == ["/lib/sq.js", "/main.js"]


def test_prints_linked_program(project, capsys):
    assert main([str(project / "main.js")]) == 0
    out = capsys.readouterr().out
    assert out.startswith("function __$lib$sq$$dot$$js__() {")
    assert 'const sq = __access_export__(___$lib$sq$$dot$$js___, "sq");' in out


def test_run(project, capsys):
    assert main([str(project / "main.js"), "--run"]) == 0
    assert capsys.readouterr().out == "hi\n16\n"


def test_link_error_exit_code(tmp_path, capsys):
    (tmp_path / "main.js").write_text('import { a } from "./missing.js";\na;\n')
    assert main([str(tmp_path / "main.js")]) == 1
    assert "Module './missing.js' not found." in capsys.readouterr().err


def test_missing_entry_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.js")]) == 1
    assert "file not found" in capsys.readouterr().err
