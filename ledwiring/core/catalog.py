"""Static table of the hardware controllers the planner can choose from."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from ..errors import CatalogError
from .models import Controller, ControllerType

logger = logging.getLogger(__name__)

DEFAULT_CONTROLLERS: List[Controller] = [
    Controller("tb2", "TB2", 1, 0.65, ControllerType.ASYNCHRONOUS, 0),
    Controller("tb40", "TB40", 2, 1.3, ControllerType.ASYNCHRONOUS, 2),
    Controller("tb60", "TB60", 4, 2.3, ControllerType.ASYNCHRONOUS, 2),
    Controller("vx1", "VX1", 2, 1.3, ControllerType.SYNCHRONOUS, 2),
    Controller("vx400", "VX400", 4, 2.6, ControllerType.SYNCHRONOUS, 2),
    Controller("vx600", "VX600", 6, 3.9, ControllerType.SYNCHRONOUS, 2),
    Controller("vx1000", "VX1000", 10, 6.5, ControllerType.SYNCHRONOUS, 2),
    Controller("4k-prime", "4K Prime", 16, 13, ControllerType.SYNCHRONOUS, 2),
]


class ControllerCatalog:
    """
    Immutable controller table, ordered ascending by port count.

    The sort is stable, so controllers with equal port counts keep the
    order they were declared in.
    """

    def __init__(self, controllers: Iterable[Controller]):
        items = list(controllers)
        if not items:
            raise CatalogError("Controller catalog is empty")

        seen = set()
        for ctrl in items:
            if ctrl.id in seen:
                raise CatalogError(f"Duplicate controller id: {ctrl.id}")
            seen.add(ctrl.id)
            if ctrl.port_count < 1:
                raise CatalogError(f"{ctrl.id}: port_count must be at least 1")
            if ctrl.pixel_capacity <= 0:
                raise CatalogError(f"{ctrl.id}: pixel_capacity must be positive")
            if ctrl.min_ports_for_redundancy < 0:
                raise CatalogError(f"{ctrl.id}: min_ports_for_redundancy must be non-negative")

        self._controllers = tuple(sorted(items, key=lambda c: c.port_count))
        self._by_id = {c.id: c for c in self._controllers}

    def __iter__(self) -> Iterator[Controller]:
        return iter(self._controllers)

    def __len__(self) -> int:
        return len(self._controllers)

    @property
    def controllers(self) -> tuple:
        return self._controllers

    def get(self, controller_id: str) -> Optional[Controller]:
        return self._by_id.get(controller_id)

    def candidates(self, redundancy: bool) -> List[Controller]:
        """All controllers, or only those able to mirror ports."""
        if not redundancy:
            return list(self._controllers)
        return [c for c in self._controllers if c.supports_redundancy]


DEFAULT_CATALOG = ControllerCatalog(DEFAULT_CONTROLLERS)


def _controller_from_dict(entry: Dict[str, Any]) -> Controller:
    try:
        cid = str(entry["id"]).strip()
        return Controller(
            id=cid,
            name=str(entry.get("name") or cid),
            port_count=int(entry["port_count"]),
            pixel_capacity=float(entry["pixel_capacity"]),
            type=ControllerType(entry.get("type", ControllerType.SYNCHRONOUS.value)),
            min_ports_for_redundancy=int(entry.get("min_ports_for_redundancy", 0)),
        )
    except KeyError as e:
        raise CatalogError(f"Controller entry missing field {e}: {entry!r}") from e
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Invalid controller entry {entry!r}: {e}") from e


def catalog_from_list(entries: Iterable[Any]) -> ControllerCatalog:
    controllers: List[Controller] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise CatalogError(f"Controller entry must be a mapping, got {entry!r}")
        controllers.append(_controller_from_dict(entry))
    return ControllerCatalog(controllers)


def load_catalog(path: Union[str, Path]) -> ControllerCatalog:
    """Load a catalog from a YAML file with a top-level `controllers:` list."""
    import yaml

    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {path}: {e}") from e

    entries = data.get("controllers") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise CatalogError(f"{path}: expected a 'controllers' list")

    catalog = catalog_from_list(entries)
    logger.debug("Loaded %d controllers from %s", len(catalog), path)
    return catalog
