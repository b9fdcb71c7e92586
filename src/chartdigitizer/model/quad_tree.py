"""
Quad-Tree Spatial Index
=======================
Hierarchical partition of marker points used for hit-testing.

Why is this file needed?
------------------------
1. Hit-testing: Every pointer move asks "which marker is closest to the cursor
   within a few screen pixels?". A radius query on the tree answers that
   without scanning every point.
2. Debugging: The node boundaries can be drawn on the canvas to visualise how
   the points are partitioned.

The tree is never rebalanced. Callers rebuild it from the full point
collection with `create_quad_tree` whenever the collection changes.

Classes:
    QuadTree: A node of the tree (the root is just a node without a parent).

Functions:
    find_boundary: Padded bounding box of a point collection.
    create_quad_tree: Builds a tree holding every point of a collection.
"""
from __future__ import annotations

import logging
import math
from typing import Iterator, List, Optional, Sequence

from chartdigitizer.config import BOUNDARY_PADDING, DEFAULT_CAPACITY, MAX_DEPTH, MIN_BOUNDARY_SIZE
from chartdigitizer.model.geometry_primitives import Point, Rect

logger = logging.getLogger(__name__)


class QuadTree:
    def __init__(self, boundary: Rect, capacity: int = DEFAULT_CAPACITY, depth: int = 0) -> None:
        if capacity < 1:
            raise ValueError(f"Quad-tree capacity must be at least 1, got {capacity}.")

        self.boundary: Rect = boundary
        self.capacity: int = capacity
        self.depth: int = depth

        self.points: List[Point] = []
        self.divided: bool = False

        self.nw: Optional[QuadTree] = None
        self.ne: Optional[QuadTree] = None
        self.sw: Optional[QuadTree] = None
        self.se: Optional[QuadTree] = None

    # ------------------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------------------

    @property
    def children(self) -> tuple[QuadTree, ...]:
        if not self.divided:
            return ()
        return self.nw, self.ne, self.sw, self.se

    def _subdivide(self) -> None:
        nw, ne, sw, se = self.boundary.quadrants()
        self.nw = QuadTree(nw, self.capacity, self.depth + 1)
        self.ne = QuadTree(ne, self.capacity, self.depth + 1)
        self.sw = QuadTree(sw, self.capacity, self.depth + 1)
        self.se = QuadTree(se, self.capacity, self.depth + 1)
        self.divided = True

    def iter_nodes(self) -> Iterator[QuadTree]:
        """Depth-first walk over this node and all its descendants."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def __iter__(self) -> Iterator[Point]:
        for node in self.iter_nodes():
            yield from node.points

    def __len__(self) -> int:
        return sum(len(node.points) for node in self.iter_nodes())

    def __str__(self) -> str:
        spacing = "\t" * (self.depth * 2)

        result = str(self.boundary) + "\n"
        result += spacing + ", ".join(str(pt) for pt in self.points)

        if not self.divided:
            return result

        labelled = (("NW", self.nw), ("NE", self.ne), ("SE", self.se), ("SW", self.sw))
        result += "\n" + "\n".join(f"{spacing}{name}: {child}" for name, child in labelled)
        return result

    # ------------------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------------------

    def insert(self, point: Point) -> bool:
        """
        Stores the point in this node or one of its descendants.

        Returns:
            False if the point lies outside this node's boundary.
        """
        if not self.boundary.contains(point):
            return False

        if not self.divided and (len(self.points) < self.capacity or self.depth >= MAX_DEPTH):
            self.points.append(point)
            return True

        if not self.divided:
            self._subdivide()

        # Half-open containment lets exactly one child accept the point
        stored = False
        for child in self.children:
            stored = child.insert(point) or stored
        return stored

    def remove(self, point: Point) -> None:
        """
        Drops every entry sharing the point's id.

        Each node whose boundary contains the point's coordinates is filtered
        and all of its children are visited, so a stale entry anywhere along
        that path is removed too.
        """
        if not self.boundary.contains(point):
            return

        self.points = [pt for pt in self.points if pt.id != point.id]

        for child in self.children:
            child.remove(point)

    # ------------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------------

    def query(self, boundary: Rect, found: Optional[List[Point]] = None) -> List[Point]:
        """All stored points that `boundary` contains."""
        if found is None:
            found = []

        if not self.boundary.intersects(boundary):
            return found

        found.extend(pt for pt in self.points if boundary.contains(pt))

        for child in self.children:
            child.query(boundary, found)
        return found

    def query_radius(self, center: Point, radius: float) -> List[Point]:
        """All stored points within Euclidean `radius` of `center` (inclusive)."""
        if radius < 0:
            return []

        # Closed square: points exactly `radius` away east or north still qualify
        square = Rect.from_edges(
            center.x - radius,
            center.y - radius,
            math.nextafter(center.x + radius, math.inf),
            math.nextafter(center.y + radius, math.inf),
        )
        return [pt for pt in self.query(square) if pt.distance_to(center) <= radius]


def find_boundary(points: Sequence[Point]) -> Rect:
    """
    Bounding box of the points, padded by 1 % on each dimension.

    A zero extent (single point, collinear points, empty input) falls back to
    MIN_BOUNDARY_SIZE so the root always has a usable area.
    """
    if not points:
        return Rect(0.0, 0.0, MIN_BOUNDARY_SIZE, MIN_BOUNDARY_SIZE)

    xs = [pt.x for pt in points]
    ys = [pt.y for pt in points]
    x_min, x_max = min(xs), max(xs)
    y_min, y_max = min(ys), max(ys)

    w = abs(x_max - x_min) * BOUNDARY_PADDING or MIN_BOUNDARY_SIZE
    h = abs(y_max - y_min) * BOUNDARY_PADDING or MIN_BOUNDARY_SIZE

    return Rect((x_min + x_max) / 2, (y_min + y_max) / 2, w, h)


def create_quad_tree(points: Sequence[Point], capacity: int = DEFAULT_CAPACITY) -> QuadTree:
    """Builds a fresh tree holding every point in `points`."""
    tree = QuadTree(find_boundary(points), capacity)
    for pt in points:
        if not tree.insert(pt):
            logger.debug(f"Point {pt} fell outside the root boundary {tree.boundary}.")
    return tree
