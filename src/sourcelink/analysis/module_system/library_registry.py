"""
Library Module Registry

Pre-compiled library modules, looked up by bare name ('math').
The registry answers two questions:
- which names does a library export (async, used by the graph builder)
- what are the exported values (used by the runtime to bind library imports)
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Optional

from ...shared.errors import SourceLinkSourceError
from ...shared.source_location import SourceLocation
from ...utils.config import LIBRARY_FETCH_DELAY

logger = logging.getLogger(__name__)


class LibraryNotFoundError(SourceLinkSourceError):
    """Raised when an import names a library module the registry does not know"""
    error_code = "E0433"
    category = "resolution"
    help_text = "check the spelling of the module name"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Module '{name}' not found.", location)
        self.name = name


@dataclass
class LibraryEntry:
    name: str
    exports: Dict[str, Any]
    bundle: str = ""

    @property
    def exported_names(self) -> FrozenSet[str]:
        return frozenset(self.exports)


class LibraryRegistry:
    """
    In-memory library registry.

    `fetch_delay` simulates the latency of fetching a module manifest so
    concurrent lookups actually interleave.
    """

    def __init__(self, fetch_delay: float = LIBRARY_FETCH_DELAY):
        self._libraries: Dict[str, LibraryEntry] = {}
        self.fetch_delay = fetch_delay
        self.fetch_count: Dict[str, int] = {}

    def register(self, name: str, exports: Dict[str, Any], bundle: str = "") -> None:
        self._libraries[name] = LibraryEntry(name=name, exports=dict(exports), bundle=bundle)
        logger.debug(f"LibraryRegistry: registered '{name}' ({len(exports)} exports)")

    def __contains__(self, name: str) -> bool:
        return name in self._libraries

    async def get_library_exports(self, name: str) -> Optional[FrozenSet[str]]:
        """Export names of a library module, None if the module is unknown"""
        self.fetch_count[name] = self.fetch_count.get(name, 0) + 1
        await asyncio.sleep(self.fetch_delay)
        entry = self._libraries.get(name)
        if entry is None:
            logger.debug(f"LibraryRegistry: '{name}' not found")
            return None
        return entry.exported_names

    def get_library(self, name: str) -> LibraryEntry:
        entry = self._libraries.get(name)
        if entry is None:
            raise LibraryNotFoundError(name)
        return entry

    def get_bundle(self, name: str) -> str:
        return self.get_library(name).bundle


def _math_exports() -> Dict[str, Any]:
    exports: Dict[str, Any] = {
        "math_PI": math.pi,
        "math_E": math.e,
    }
    unary: Dict[str, Callable[..., Any]] = {
        "math_abs": abs,
        "math_sqrt": math.sqrt,
        "math_floor": math.floor,
        "math_ceil": math.ceil,
        "math_sin": math.sin,
        "math_cos": math.cos,
        "math_log": math.log,
    }
    exports.update(unary)
    exports["math_pow"] = math.pow
    exports["math_max"] = max
    exports["math_min"] = min
    return exports


def default_registry(fetch_delay: float = LIBRARY_FETCH_DELAY) -> LibraryRegistry:
    """Registry preloaded with the 'math' library"""
    registry = LibraryRegistry(fetch_delay=fetch_delay)
    registry.register("math", _math_exports(), bundle="math")
    return registry
