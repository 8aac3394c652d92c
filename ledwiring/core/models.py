from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from ..errors import ValidationError
from ..views.geometry import Point, Rect, manhattan_length

# One data-hub port's pixel budget (protocol constant)
PIXEL_LIMIT_PER_PORT = 655_000


class ControllerType(str, Enum):
    SYNCHRONOUS = "synchronous"
    ASYNCHRONOUS = "asynchronous"


class NodeKind(str, Enum):
    """Node types emitted for the graph consumers."""

    HUB = "hub"
    BACKUP_HUB = "backupHub"
    CABINET = "cabinet"
    POWER_FEED = "powerFeed"


class EdgeKind(str, Enum):
    HUB_FEED = "hub_feed"  # hub -> first cabinet of its group
    CHAIN = "chain"  # cabinet -> next cabinet, same group
    BACKUP_FEED = "backup_feed"  # backup hub -> last cabinet of its group
    BACKUP_CHAIN = "backup_chain"  # reversed chain under redundancy
    POWER_FEED = "power_feed"
    POWER_CHAIN = "power_chain"


class PathStyle(str, Enum):
    STRAIGHT = "straight"
    STEP = "step"
    POLYLINE = "polyline"


@dataclass(frozen=True)
class Controller:
    id: str
    name: str
    port_count: int
    pixel_capacity: float  # millions of pixels
    type: ControllerType
    min_ports_for_redundancy: int = 0  # 0: never redundant

    @property
    def pixel_capacity_pixels(self) -> float:
        return self.pixel_capacity * 1_000_000

    @property
    def supports_redundancy(self) -> bool:
        return self.min_ports_for_redundancy > 0

    def handles(self, ports: int, pixels: float) -> bool:
        return self.port_count >= ports and self.pixel_capacity_pixels >= pixels


@dataclass(frozen=True)
class Product:
    """Pixel geometry of one cabinet of a display product."""

    name: str
    resolution_width: int
    resolution_height: int
    cabinet_width_mm: float
    cabinet_height_mm: float
    pixel_pitch: float

    def __post_init__(self):
        if self.resolution_width < 0 or self.resolution_height < 0:
            raise ValidationError(f"{self.name}: resolution must be non-negative")
        if self.cabinet_width_mm <= 0 or self.cabinet_height_mm <= 0:
            raise ValidationError(f"{self.name}: cabinet dimensions must be positive")
        if self.pixel_pitch <= 0:
            raise ValidationError(f"{self.name}: pixel pitch must be positive")

    @property
    def pixels_per_cabinet(self) -> int:
        return self.resolution_width * self.resolution_height

    @classmethod
    def from_dimensions(
        cls,
        name: str,
        cabinet_width_mm: float,
        cabinet_height_mm: float,
        pixel_pitch: float,
    ) -> "Product":
        """Derive the cabinet resolution from its physical size and pitch."""
        if pixel_pitch <= 0:
            raise ValidationError(f"{name}: pixel pitch must be positive")
        return cls(
            name=name,
            resolution_width=round(cabinet_width_mm / pixel_pitch),
            resolution_height=round(cabinet_height_mm / pixel_pitch),
            cabinet_width_mm=cabinet_width_mm,
            cabinet_height_mm=cabinet_height_mm,
            pixel_pitch=pixel_pitch,
        )


@dataclass(frozen=True)
class CabinetGrid:
    columns: int
    rows: int

    def __post_init__(self):
        if self.columns < 0 or self.rows < 0:
            raise ValidationError(f"Cabinet grid must be non-negative, got {self.columns}x{self.rows}")

    @property
    def cabinet_count(self) -> int:
        return self.columns * self.rows

    @property
    def is_empty(self) -> bool:
        return self.cabinet_count == 0

    def total_pixels(self, product: Product) -> int:
        return product.resolution_width * self.columns * product.resolution_height * self.rows

    @classmethod
    def for_display(cls, width_mm: float, height_mm: float, product: Product) -> "CabinetGrid":
        """Smallest grid of the product's cabinets covering a display size."""
        if width_mm < 0 or height_mm < 0:
            raise ValidationError("Display dimensions must be non-negative")
        return cls(
            columns=math.ceil(width_mm / product.cabinet_width_mm),
            rows=math.ceil(height_mm / product.cabinet_height_mm),
        )


@dataclass(frozen=True)
class Workload:
    total_pixels: int
    data_hub_ports: int
    is_redundancy_mode: bool = False

    @classmethod
    def for_grid(
        cls,
        grid: CabinetGrid,
        product: Product,
        is_redundancy_mode: bool = False,
        pixel_limit_per_port: int = PIXEL_LIMIT_PER_PORT,
    ) -> "Workload":
        total = grid.total_pixels(product)
        return cls(
            total_pixels=total,
            data_hub_ports=math.ceil(total / pixel_limit_per_port),
            is_redundancy_mode=is_redundancy_mode,
        )


@dataclass(frozen=True)
class ControllerSelection:
    selected_controller: Controller
    required_ports: int
    backup_ports: int
    data_hub_ports: int
    total_pixels: int
    is_redundancy_mode: bool
    # Port demand before any fallback rewrote required_ports
    demanded_ports: int = 0
    capacity_exceeded: bool = False

    @property
    def port_utilization(self) -> float:
        ports = self.selected_controller.port_count
        return self.demanded_ports / ports if ports else 0.0

    @property
    def pixel_utilization(self) -> float:
        capacity = self.selected_controller.pixel_capacity_pixels
        return self.total_pixels / capacity if capacity else 0.0


@dataclass(frozen=True)
class GridCell:
    cabinet_id: int  # 1-based, assigned in traversal order
    row: int
    column: int


@dataclass(frozen=True)
class HubGroup:
    index: int
    cabinets: Tuple[int, ...]
    pixels_per_cabinet: int = 0

    @property
    def first_cabinet(self) -> int:
        return self.cabinets[0]

    @property
    def last_cabinet(self) -> int:
        return self.cabinets[-1]

    @property
    def size(self) -> int:
        return len(self.cabinets)

    @property
    def pixel_load(self) -> int:
        return self.size * self.pixels_per_cabinet


@dataclass(frozen=True)
class PowerRun:
    index: int
    cabinets: Tuple[int, ...]

    @property
    def first_cabinet(self) -> int:
        return self.cabinets[0]

    @property
    def last_cabinet(self) -> int:
        return self.cabinets[-1]

    @property
    def size(self) -> int:
        return len(self.cabinets)


@dataclass(frozen=True)
class CablePath:
    points: Tuple[Point, ...]
    style: PathStyle = PathStyle.STEP

    @property
    def source(self) -> Point:
        return self.points[0]

    @property
    def target(self) -> Point:
        return self.points[-1]

    @property
    def bend_points(self) -> Tuple[Point, ...]:
        return self.points[1:-1]

    @property
    def length(self) -> float:
        return manhattan_length(self.points)

    def reversed(self) -> "CablePath":
        return CablePath(points=tuple(reversed(self.points)), style=self.style)


@dataclass(frozen=True)
class WiringNode:
    id: str
    kind: NodeKind
    label: str
    rect: Rect
    group_index: Optional[int] = None
    color: Optional[str] = None
    cell: Optional[GridCell] = None


@dataclass(frozen=True)
class WiringEdge:
    from_id: str
    to_id: str
    kind: EdgeKind
    path: CablePath
    group_index: Optional[int] = None
    color: Optional[str] = None
    dashed: bool = False

    def key(self) -> str:
        """Unique key for deduplication."""
        return f"{self.from_id}->{self.to_id}:{self.kind.value}"


@dataclass
class WiringGraph:
    """
    Node/edge graph handed to the rendering layer.
    """

    nodes: List[WiringNode] = field(default_factory=list)
    edges: List[WiringEdge] = field(default_factory=list)
    # Group background bounds keyed by hub / run index
    groups: Dict[int, Rect] = field(default_factory=dict)

    _node_map: Dict[str, WiringNode] = field(default_factory=dict, repr=False)
    _edges_from: Dict[str, List[WiringEdge]] = field(default_factory=dict, repr=False)
    _edges_to: Dict[str, List[WiringEdge]] = field(default_factory=dict, repr=False)
    _edge_keys: Set[str] = field(default_factory=set, repr=False)

    def get_node(self, node_id: str) -> Optional[WiringNode]:
        """Get node by ID (O(1))."""
        return self._node_map.get(node_id)

    def get_edges_from(self, node_id: str) -> List[WiringEdge]:
        """Get outgoing edges (O(1))."""
        return self._edges_from.get(node_id, [])

    def get_edges_to(self, node_id: str) -> List[WiringEdge]:
        """Get incoming edges (O(1))."""
        return self._edges_to.get(node_id, [])

    def add_node(self, node: WiringNode) -> bool:
        """Add node if not exists. Returns True if added."""
        if node.id in self._node_map:
            return False
        self.nodes.append(node)
        self._node_map[node.id] = node
        return True

    def add_edge(self, edge: WiringEdge) -> bool:
        """Add edge if not duplicate. Returns True if added."""
        key = edge.key()
        if key in self._edge_keys:
            return False

        self.edges.append(edge)
        self._edge_keys.add(key)
        self._edges_from.setdefault(edge.from_id, []).append(edge)
        self._edges_to.setdefault(edge.to_id, []).append(edge)
        return True

    def nodes_of(self, kind: NodeKind) -> List[WiringNode]:
        return [n for n in self.nodes if n.kind == kind]

    def edges_of(self, kind: EdgeKind) -> List[WiringEdge]:
        return [e for e in self.edges if e.kind == kind]

    def stats(self) -> Dict[str, int]:
        """Return graph statistics."""
        out = {f"{k.value}_nodes": len(self.nodes_of(k)) for k in NodeKind}
        out.update({f"{k.value}_edges": len(self.edges_of(k)) for k in EdgeKind})
        return out


def cabinet_node_id(cabinet_id: int) -> str:
    return f"cabinet-{cabinet_id}"


def hub_node_id(index: int) -> str:
    return f"data-hub-{index + 1}"


def backup_hub_node_id(index: int) -> str:
    return f"backup-hub-{index + 1}"


def power_feed_node_id(index: int) -> str:
    return f"power-feed-{index + 1}"
