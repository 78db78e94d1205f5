"""
Pytest configuration and shared fixtures for all sourcelink tests.

Parser construction compiles the LALR tables, so parser, driver and runtime
instances are session-scoped and shared; all three are stateless between
calls.
"""

import sys
import pytest
from typing import Dict, Optional
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))
from sourcelink.analysis.module_system import LibraryRegistry, default_registry
from sourcelink.compiler.driver import LinkerDriver, LinkOptions
from sourcelink.frontend.parser import Parser
from sourcelink.runtime.runtime import SourceRuntime


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """Session-scoped parser; Lark native caching keeps construction cheap."""
    return Parser()


@pytest.fixture(scope="session")
def session_registry():
    """Registry holding the 'math' library."""
    return default_registry()


@pytest.fixture(scope="session")
def session_driver(session_parser, session_registry):
    return LinkerDriver(parser=session_parser, registry=session_registry)


@pytest.fixture(scope="session")
def session_runtime(session_registry):
    return SourceRuntime(registry=session_registry)


# =============================================================================
# Function-scoped aliases
# =============================================================================

@pytest.fixture
def parser(session_parser):
    return session_parser


@pytest.fixture
def driver(session_driver):
    return session_driver


@pytest.fixture
def runtime(session_runtime):
    return session_runtime


@pytest.fixture
def registry():
    """Fresh registry per test, so fetch counts start at zero."""
    return default_registry()


# =============================================================================
# Helper fixtures
# =============================================================================

@pytest.fixture(scope="session")
def link_and_run_factory(session_driver, session_runtime):
    """
    Factory fixture that provides a link_and_run function.
    Uses session-scoped instances for maximum performance.
    """
    def _link_and_run(
        files: Dict[str, str],
        entry: str = "/main.js",
        options: Optional[LinkOptions] = None,
        driver: Optional[LinkerDriver] = None,
        runtime: Optional[SourceRuntime] = None,
    ):
        from tests.test_utils import RunResult
        drv = driver if driver is not None else session_driver
        rt = runtime if runtime is not None else session_runtime

        link_result = drv.link(files, entry, options)
        if not link_result.success:
            return RunResult(
                success=False,
                link_errors=link_result.errors,
                errors=link_result.get_errors(),
            )

        exec_result = rt.execute(link_result.program)
        error_str = str(exec_result.error) if exec_result.error else None
        return RunResult(
            value=exec_result.value,
            outputs=exec_result.outputs,
            displayed=exec_result.displayed,
            success=exec_result.error is None,
            error=error_str,
            errors=[error_str] if error_str else [],
            program=link_result.program,
        )

    return _link_and_run


@pytest.fixture
def link_and_run(link_and_run_factory):
    """Convenience fixture that provides the link_and_run function."""
    return link_and_run_factory


@pytest.fixture
def make_registry():
    """Build a registry from {library: {name: value}}."""
    def _make(libraries: Dict[str, Dict[str, object]], fetch_delay: float = 0.0) -> LibraryRegistry:
        reg = LibraryRegistry(fetch_delay=fetch_delay)
        for name, exports in libraries.items():
            reg.register(name, exports)
        return reg
    return _make


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
