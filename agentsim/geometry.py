"""Planar paths made of move/line elements, and the collision helpers built on them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterator

from shapely.geometry import GeometryCollection, LineString, Point as ShapelyPoint, Polygon
from shapely.ops import unary_union
from shapely.validation import make_valid

Point = tuple[float, float]

DEFAULT_TOLERANCE = 2.0


class ElementType(IntEnum):
    """Kinds of path elements, numbered as in the stored project files."""

    MOVE_TO = 0
    LINE_TO = 1
    CURVE_TO = 2
    CURVE_TO_DATA = 3


@dataclass(frozen=True)
class PathElement:
    """One vertex of a path together with how it is reached."""

    type: ElementType
    x: float
    y: float

    @property
    def point(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its edges."""

    left: float
    top: float
    right: float
    bottom: float

    def center(self) -> Point:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)


@dataclass
class Path:
    """A sequence of move-to and line-to elements forming one or more subpaths."""

    elements: list[PathElement] = field(default_factory=list)

    def __iter__(self) -> Iterator[PathElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def move_to(self, x: float, y: float) -> "Path":
        self.elements.append(PathElement(ElementType.MOVE_TO, float(x), float(y)))
        return self

    def line_to(self, x: float, y: float) -> "Path":
        if not self.elements:
            self.move_to(0.0, 0.0)
        self.elements.append(PathElement(ElementType.LINE_TO, float(x), float(y)))
        return self

    def current_position(self) -> Point:
        if not self.elements:
            return (0.0, 0.0)
        return self.elements[-1].point

    def is_empty(self) -> bool:
        """True when the path has no elements or only a single move."""
        return not self.elements or (
            len(self.elements) == 1 and self.elements[0].type is ElementType.MOVE_TO
        )

    def bounding_rect(self) -> Rect:
        if not self.elements:
            return Rect(0.0, 0.0, 0.0, 0.0)
        xs = [element.x for element in self.elements]
        ys = [element.y for element in self.elements]
        return Rect(min(xs), min(ys), max(xs), max(ys))

    def translated(self, dx: float, dy: float) -> "Path":
        return Path(
            [PathElement(e.type, e.x + dx, e.y + dy) for e in self.elements]
        )

    def to_json(self) -> list[dict[str, Any]]:
        return [
            {"type": int(element.type), "x": element.x, "y": element.y}
            for element in self.elements
        ]

    @classmethod
    def from_json(cls, data: list[dict[str, Any]]) -> "Path":
        """Rebuild a path from stored elements; only moves and lines are kept."""
        path = cls()
        for item in data:
            kind = _as_int(item.get("type", 0))
            x = _as_float(item.get("x", 0.0))
            y = _as_float(item.get("y", 0.0))
            if kind == ElementType.MOVE_TO:
                path.move_to(x, y)
            elif kind == ElementType.LINE_TO:
                path.line_to(x, y)
        return path


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def simplify_path(path: Path, tolerance: float = DEFAULT_TOLERANCE) -> Path:
    """Drop vertices closer than ``tolerance`` to the last kept one."""
    simplified = Path()
    if not path.elements:
        return simplified
    first = path.elements[0]
    simplified.move_to(first.x, first.y)
    limit = tolerance * tolerance
    for element in path.elements[1:]:
        last_x, last_y = simplified.current_position()
        dx = element.x - last_x
        dy = element.y - last_y
        if dx * dx + dy * dy > limit:
            simplified.line_to(element.x, element.y)
    return simplified


def nearest_point_on_path(path: Path, point: Point) -> Point:
    """Return the path vertex nearest to ``point``, or the origin for an empty path."""
    nearest: Point = (0.0, 0.0)
    best = math.inf
    for element in path.elements:
        distance = math.hypot(element.x - point[0], element.y - point[1])
        if distance < best:
            best = distance
            nearest = element.point
    return nearest


def _subpaths(path: Path) -> Iterator[list[Point]]:
    current: list[Point] = []
    for element in path.elements:
        if element.type is ElementType.MOVE_TO and current:
            yield current
            current = []
        if not current or current[-1] != element.point:
            current.append(element.point)
    if current:
        yield current


def _to_geometry(path: Path):
    parts = []
    for points in _subpaths(path):
        if len(points) >= 3:
            polygon = Polygon(points)
            parts.append(polygon if polygon.is_valid else make_valid(polygon))
        elif len(points) == 2:
            parts.append(LineString(points))
        else:
            parts.append(ShapelyPoint(points[0]))
    if not parts:
        return GeometryCollection()
    return unary_union(parts)


def calculate_penetration(path1: Path, path2: Path) -> Point:
    """Offset between the nearest vertices of both paths around their overlap."""
    if path1.is_empty() or path2.is_empty():
        return (0.0, 0.0)
    first = _to_geometry(path1)
    second = _to_geometry(path2)
    if not first.intersects(second):
        return (0.0, 0.0)
    overlap = first.intersection(second)
    if overlap.is_empty:
        return (0.0, 0.0)
    min_x, min_y, max_x, max_y = overlap.bounds
    centre = ((min_x + max_x) / 2, (min_y + max_y) / 2)
    near1 = nearest_point_on_path(path1, centre)
    near2 = nearest_point_on_path(path2, centre)
    return (near1[0] - near2[0], near1[1] - near2[1])