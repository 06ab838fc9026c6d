from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from .errors import NotFound
from .models import Asset


class AssetHierarchyIndex:
    """Parent/child lookups over a flat asset store.

    Assets are kept in an arena (store order) with an id index and a
    parent -> children index built once, so traversals never rescan the store.
    """

    def __init__(self, assets: Iterable[Asset]):
        self._arena: List[Asset] = list(assets)
        self._positions: Dict[str, int] = {}
        self._children: Dict[Optional[str], List[int]] = defaultdict(list)
        for position, asset in enumerate(self._arena):
            self._positions[asset.id] = position
        for position, asset in enumerate(self._arena):
            parent_id = asset.parent_id if asset.parent_id in self._positions else None
            self._children[parent_id].append(position)

    def __len__(self) -> int:
        return len(self._arena)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._positions

    def find(self, asset_id: Optional[str]) -> Optional[Asset]:
        position = self._positions.get(asset_id) if asset_id is not None else None
        return self._arena[position] if position is not None else None

    def get(self, asset_id: str) -> Asset:
        asset = self.find(asset_id)
        if asset is None:
            raise NotFound("asset", asset_id)
        return asset

    def parent_of(self, asset_id: str) -> Optional[Asset]:
        return self.find(self.get(asset_id).parent_id)

    def children_of(self, asset_id: Optional[str]) -> List[Asset]:
        """Direct children in store order; ``None`` yields the root nodes."""
        return [self._arena[position] for position in self._children.get(asset_id, [])]

    def breadcrumb_path(self, asset_id: str) -> List[Asset]:
        path: List[Asset] = []
        seen: Set[str] = set()
        current: Optional[Asset] = self.get(asset_id)
        while current is not None and current.id not in seen:
            seen.add(current.id)
            path.append(current)
            current = self.find(current.parent_id)
        path.reverse()
        return path

    def collect_descendant_parts(self, asset_id: str) -> List[Asset]:
        parts: List[Asset] = []
        for child in self.children_of(asset_id):
            if child.category == "part":
                parts.append(child)
            else:
                parts.extend(self.collect_descendant_parts(child.id))
        return parts

    def machines(self) -> List[Asset]:
        return [asset for asset in self._arena if asset.category == "machine"]

    def search(self, query: str, parent_id: Optional[str] = None) -> List[Asset]:
        needle = query.strip().lower()
        if not needle:
            return self.children_of(parent_id)
        if parent_id is None:
            # root level searches all accounts by name or customer number
            return [
                asset
                for asset in self._arena
                if asset.category == "customer"
                and (needle in asset.name.lower() or needle in (asset.customer_number or "").lower())
            ]
        return [asset for asset in self.children_of(parent_id) if needle in asset.name.lower()]
