"""
Cycle Detection and Topological Sorting

Kahn's algorithm over the local modules of a module table.
"""

import logging
from collections import deque
from typing import Dict, List, Optional, Sequence, Set

from ...shared.errors import SourceLinkSourceError
from ...shared.source_location import SourceLocation
from .module_info import LocalModule

logger = logging.getLogger(__name__)


class CircularImportError(SourceLinkSourceError):
    """
    Raised when local modules import each other in a cycle.

    `cycle` lists the modules in import order without repeating the first
    one: ['/a.js', '/b.js'] means '/a.js' imports '/b.js' and '/b.js'
    imports '/a.js'.
    """
    error_code = "E0391"
    category = "structural"
    help_text = "break the circular import cycle by removing imports from any of the offending files"

    def __init__(self, cycle: Sequence[str], location: Optional[SourceLocation] = None):
        self.cycle = list(cycle)
        formatted = " -> ".join(f"'{key}'" for key in self.cycle + self.cycle[:1])
        super().__init__(f"Circular import detected: {formatted}.", location)


def topological_sort(table) -> List[str]:
    """
    Evaluation order for every module in `table`: each module appears after
    all modules it imports. Library modules come first, sorted by name.

    Record indegrees are copied, never mutated.

    Raises:
        CircularImportError: with one concrete cycle among the local modules
    """
    local_keys = [key for key, record in table.items() if not record.is_library]
    library_keys = sorted(key for key, record in table.items() if record.is_library)
    indegree: Dict[str, int] = {key: table[key].indegree for key in local_keys}

    # Kahn's algorithm yields importers before the modules they import
    queue = deque(key for key in local_keys if indegree[key] == 0)
    dependents_first: List[str] = []
    while queue:
        key = queue.popleft()
        dependents_first.append(key)
        for dependency in table[key].dependencies:
            if dependency not in indegree:
                continue
            indegree[dependency] -= 1
            if indegree[dependency] == 0:
                queue.append(dependency)

    if len(dependents_first) < len(local_keys):
        unordered = [key for key in local_keys if indegree[key] > 0]
        cycle = find_cycle(table, unordered)
        raise CircularImportError(cycle, _cycle_location(table, cycle))

    order = library_keys + list(reversed(dependents_first))
    logger.debug(f"Topological order: {order}")
    return order


def find_cycle(table, unordered: Sequence[str]) -> List[str]:
    """
    Reconstruct one cycle among the modules Kahn's algorithm could not order.

    Every unordered module still has an unordered importer, so stepping from
    importer to importer must eventually revisit a module. The revisited
    stretch, reversed, is a cycle in import order.
    """
    remaining: Set[str] = set(unordered)
    importers: Dict[str, List[str]] = {key: [] for key in unordered}
    for key in unordered:
        for dependency in table[key].dependencies:
            if dependency in remaining:
                importers[dependency].append(key)

    walk: List[str] = []
    position: Dict[str, int] = {}
    current = unordered[0]
    while current not in position:
        position[current] = len(walk)
        walk.append(current)
        current = importers[current][0]

    cycle = walk[position[current]:]
    cycle.reverse()
    logger.debug(f"Cycle found: {cycle}")
    return cycle


def _cycle_location(table, cycle: Sequence[str]) -> Optional[SourceLocation]:
    """Where the first module of `cycle` imports the next one"""
    record = table[cycle[0]]
    if not isinstance(record, LocalModule):
        return None
    return record.import_location(cycle[1 % len(cycle)])
