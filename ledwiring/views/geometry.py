from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def cx(self) -> float:
        return self.x + self.w / 2

    @property
    def cy(self) -> float:
        return self.y + self.h / 2

    def padded(self, left: float, top: float, right: float, bottom: float) -> "Rect":
        return Rect(self.x - left, self.y - top, self.w + left + right, self.h + top + bottom)


def ports(r: Rect) -> Dict[str, Point]:
    return {
        "N": (r.cx, r.top),
        "S": (r.cx, r.bottom),
        "W": (r.left, r.cy),
        "E": (r.right, r.cy),
    }


def bounding_rect(rects: Iterable[Rect]) -> Optional[Rect]:
    rs = list(rects)
    if not rs:
        return None
    left = min(r.left for r in rs)
    top = min(r.top for r in rs)
    right = max(r.right for r in rs)
    bottom = max(r.bottom for r in rs)
    return Rect(left, top, right - left, bottom - top)


def simplify(pts: Sequence[Point]) -> List[Point]:
    """Drop repeated points and interior points lying on a straight run."""
    out: List[Point] = []
    for p in pts:
        if out and out[-1] == p:
            continue
        if len(out) >= 2:
            (x0, y0), (x1, y1) = out[-2], out[-1]
            if (x0 == x1 == p[0]) or (y0 == y1 == p[1]):
                out[-1] = p
                continue
        out.append(p)
    return out


def manhattan_length(pts: Sequence[Point]) -> float:
    return sum(abs(b[0] - a[0]) + abs(b[1] - a[1]) for a, b in zip(pts, pts[1:]))


def is_orthogonal(pts: Sequence[Point]) -> bool:
    return all(a[0] == b[0] or a[1] == b[1] for a, b in zip(pts, pts[1:]))


def step_path(src: Point, dst: Point) -> List[Point]:
    """Orthogonal step: horizontal to the midpoint x, vertical, horizontal in."""
    if src[1] == dst[1] or src[0] == dst[0]:
        return simplify([src, dst])
    mid_x = (src[0] + dst[0]) / 2
    return simplify([src, (mid_x, src[1]), (mid_x, dst[1]), dst])


def elbow_path(src: Point, dst: Point, *, lane_x: float, lane_y: float) -> List[Point]:
    """Horizontal to lane_x, vertical to lane_y, horizontal over dst, vertical in."""
    return simplify(
        [
            src,
            (lane_x, src[1]),
            (lane_x, lane_y),
            (dst[0], lane_y),
            dst,
        ]
    )


def segment_intersects_rect(p1: Point, p2: Point, r: Rect) -> bool:
    """Axis-aligned segment intersection with a rectangle (inclusive borders).

    Routing here only produces orthogonal polylines.
    """
    x1, y1 = p1
    x2, y2 = p2

    if x1 == x2:
        x = x1
        if x < r.left or x > r.right:
            return False
        lo, hi = (y1, y2) if y1 <= y2 else (y2, y1)
        return not (hi < r.top or lo > r.bottom)

    if y1 == y2:
        y = y1
        if y < r.top or y > r.bottom:
            return False
        lo, hi = (x1, x2) if x1 <= x2 else (x2, x1)
        return not (hi < r.left or lo > r.right)

    # Non-orthogonal segments are not expected.
    return False


def polyline_intersects_any_rect(
    pts: List[Point],
    rects: Iterable[Rect],
    *,
    ignore: Optional[Iterable[Rect]] = None,
) -> bool:
    ignore_set = set(ignore or [])
    rs = [r for r in rects if r not in ignore_set]
    for i in range(len(pts) - 1):
        a, b = pts[i], pts[i + 1]
        for r in rs:
            if segment_intersects_rect(a, b, r):
                return True
    return False


def segments_overlap(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """True when two orthogonal segments share a collinear stretch of non-zero length."""
    if a1[0] == a2[0] and b1[0] == b2[0] and a1[0] == b1[0]:
        lo = max(min(a1[1], a2[1]), min(b1[1], b2[1]))
        hi = min(max(a1[1], a2[1]), max(b1[1], b2[1]))
        return hi > lo
    if a1[1] == a2[1] and b1[1] == b2[1] and a1[1] == b1[1]:
        lo = max(min(a1[0], a2[0]), min(b1[0], b2[0]))
        hi = min(max(a1[0], a2[0]), max(b1[0], b2[0]))
        return hi > lo
    return False


def polylines_overlap(a: Sequence[Point], b: Sequence[Point]) -> bool:
    for a1, a2 in zip(a, a[1:]):
        for b1, b2 in zip(b, b[1:]):
            if segments_overlap(a1, a2, b1, b2):
                return True
    return False


def segments_cross(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """True when a horizontal and a vertical segment meet.

    Meeting at a point that ends both segments (a shared port or corner) does
    not count; a T-junction does.
    """
    if a1[1] == a2[1] and b1[0] == b2[0]:
        (h1, h2), (v1, v2) = (a1, a2), (b1, b2)
    elif a1[0] == a2[0] and b1[1] == b2[1]:
        (h1, h2), (v1, v2) = (b1, b2), (a1, a2)
    else:
        return False

    p = (v1[0], h1[1])
    if not min(h1[0], h2[0]) <= p[0] <= max(h1[0], h2[0]):
        return False
    if not min(v1[1], v2[1]) <= p[1] <= max(v1[1], v2[1]):
        return False
    return not (p in (h1, h2) and p in (v1, v2))


def polyline_crossings(a: Sequence[Point], b: Sequence[Point]) -> int:
    """Number of places where polyline a crosses polyline b."""
    return sum(
        1
        for a1, a2 in zip(a, a[1:])
        for b1, b2 in zip(b, b[1:])
        if segments_cross(a1, a2, b1, b2)
    )


def route_via_outer_lane(
    src: Point,
    dst: Point,
    *,
    lane_x: float,
    approach_y: Optional[float] = None,
) -> List[Point]:
    """Route an orthogonal polyline via an external vertical lane.

    Without approach_y the lane is left at dst's height and the path enters
    dst horizontally. With approach_y the path leaves the lane at that height,
    runs over dst and drops in vertically.
    """
    if approach_y is None:
        return simplify(
            [
                src,
                (lane_x, src[1]),
                (lane_x, dst[1]),
                dst,
            ]
        )
    return simplify(
        [
            src,
            (lane_x, src[1]),
            (lane_x, approach_y),
            (dst[0], approach_y),
            dst,
        ]
    )
