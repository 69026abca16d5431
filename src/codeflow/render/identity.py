"""
Diagram node identities.

Two allocation policies:

- ``GlobalIdentityResolver``: category-prefixed ids (``C1``, ``CMD2``...)
  sharing one counter across the whole diagram.
- ``ChainIdentityAllocator``: plain ``N<n>`` ids handed out once a chain's
  node set is final. One allocator may be shared by several chains so that
  grouped diagrams never reuse an id.

Both are owned by a single render call.
"""

from typing import Dict, Iterable, Optional, Tuple

from ..core.types import Category, NodeKey

CATEGORY_PREFIXES: Dict[Category, str] = {
    Category.CONTROLLER: "C",
    Category.COMMAND: "CMD",
    Category.ENTITY: "E",
    Category.DOMAIN_EVENT: "DE",
    Category.INTEGRATION_EVENT: "IE",
    Category.DOMAIN_EVENT_HANDLER: "DEH",
    Category.INTEGRATION_EVENT_HANDLER: "IEH",
    Category.INTEGRATION_EVENT_CONVERTER: "IEC",
}


class GlobalIdentityResolver:
    def __init__(self):
        self._ids: Dict[Tuple[Category, str], str] = {}
        self._by_name: Dict[str, str] = {}
        self._counter = 0

    def resolve(self, category: Category, qualified_name: str) -> str:
        """Id for ``(category, qualified_name)``, allocating on first sight."""
        key = (category, qualified_name)
        node_id = self._ids.get(key)
        if node_id is None:
            self._counter += 1
            node_id = f"{CATEGORY_PREFIXES[category]}{self._counter}"
            self._ids[key] = node_id
            self._by_name.setdefault(qualified_name, node_id)
        return node_id

    def find(self, qualified_name: str) -> Optional[str]:
        """Id under the first category that registered the name, if any."""
        return self._by_name.get(qualified_name)

    def __len__(self) -> int:
        return len(self._ids)


class ChainIdentityAllocator:
    def __init__(self, start: int = 1):
        self._next = start

    def assign(self, nodes: Iterable[NodeKey]) -> Dict[NodeKey, str]:
        """Map each distinct key to a fresh ``N<n>`` id, in order."""
        ids: Dict[NodeKey, str] = {}
        for node in nodes:
            if node in ids:
                continue
            ids[node] = f"N{self._next}"
            self._next += 1
        return ids
