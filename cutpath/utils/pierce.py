# pierce.py
# Pierce count estimate: entity endpoints become nodes of an undirected multigraph and
# every connected component that contains a cycle counts as one pierce. Open contours
# never close and contribute nothing.

import logging
import math
from collections import defaultdict

from cutpath.config import POINT_TOLERANCE
from cutpath.utils.entities import Arc, Circle, Ellipse, Line, Polyline, Spline
from cutpath.utils.geometry import point_on_arc, point_on_ellipse


class PointIndex:
    """Arena of unique points, each assigned an integer id in first-seen order.

    With ``tolerance == 0`` two points are the same node only when their coordinate
    tuples are exactly equal. A positive tolerance buckets points on a grid of that
    cell size and merges a point into any existing one within ``tolerance``.
    """

    def __init__(self, tolerance=POINT_TOLERANCE):
        if not math.isfinite(tolerance) or tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance}")
        self.tolerance = tolerance
        self.points = []
        self._ids = {}
        self._buckets = defaultdict(list)

    def __len__(self):
        return len(self.points)

    def _cell(self, coords):
        return tuple(math.floor(c / self.tolerance) for c in coords)

    def _nearby(self, coords):
        cx, cy, cz = self._cell(coords)
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for dz in (-1, 0, 1):
                    yield from self._buckets.get((cx + dx, cy + dy, cz + dz), ())

    def key(self, point):
        """Id of ``point``, adding it to the arena when it is new."""
        coords = point.as_tuple()
        node = self._ids.get(coords)
        if node is not None:
            return node
        if self.tolerance > 0:
            for candidate in self._nearby(coords):
                if math.dist(coords, self.points[candidate].as_tuple()) <= self.tolerance:
                    self._ids[coords] = candidate
                    return candidate
        node = len(self.points)
        self.points.append(point)
        self._ids[coords] = node
        if self.tolerance > 0:
            self._buckets[self._cell(coords)].append(node)
        return node


class PierceGraph:
    """Undirected multigraph over entity endpoints."""

    def __init__(self, tolerance=POINT_TOLERANCE):
        self.index = PointIndex(tolerance)
        self.adjacency = []
        self.edge_count = 0

    def node(self, point):
        node = self.index.key(point)
        while len(self.adjacency) <= node:
            self.adjacency.append([])
        return node

    def add_edge(self, a, b):
        node_a = self.node(a)
        node_b = self.node(b)
        edge = self.edge_count
        self.edge_count += 1
        self.adjacency[node_a].append((node_b, edge))
        self.adjacency[node_b].append((node_a, edge))

    def add_chain(self, points, closed=False):
        for a, b in zip(points, points[1:]):
            self.add_edge(a, b)
        if closed and len(points) > 1:
            self.add_edge(points[-1], points[0])

    def add_entity(self, entity):
        if isinstance(entity, Line):
            self.add_edge(entity.start, entity.end)
        elif isinstance(entity, Arc):
            self.add_edge(
                point_on_arc(entity.center, entity.radius, entity.start_angle),
                point_on_arc(entity.center, entity.radius, entity.end_angle),
            )
        elif isinstance(entity, Circle):
            self.add_edge(entity.center, entity.center)
        elif isinstance(entity, Polyline):
            self.add_chain(entity.points, entity.closed)
        elif isinstance(entity, Spline):
            self.add_chain(entity.control_points)
        elif isinstance(entity, Ellipse):
            self.add_edge(
                point_on_ellipse(entity.center, entity.major_axis_end_point, entity.ratio, entity.start_angle),
                point_on_ellipse(entity.center, entity.major_axis_end_point, entity.ratio, entity.end_angle),
            )

    def _traverse(self, start, visited):
        """Depth-first walk over the component of ``start`` with an explicit stack.

        Returns True when the component holds a cycle: a self-loop, or any edge other
        than the tree edge a node was entered by that leads to an already visited node.
        """
        closed = False
        visited[start] = True
        stack = [(start, None, iter(self.adjacency[start]))]
        while stack:
            node, via_edge, neighbors = stack[-1]
            for neighbor, edge in neighbors:
                if edge == via_edge:
                    continue
                if visited[neighbor]:
                    closed = True
                else:
                    visited[neighbor] = True
                    stack.append((neighbor, edge, iter(self.adjacency[neighbor])))
                    break
            else:
                stack.pop()
        return closed

    def count_closed_loops(self):
        visited = [False] * len(self.adjacency)
        loops = 0
        for node in range(len(self.adjacency)):
            if not visited[node] and self._traverse(node, visited):
                loops += 1
        return loops


def build_graph(entities, tolerance=POINT_TOLERANCE):
    graph = PierceGraph(tolerance)
    for entity in entities:
        graph.add_entity(entity)
    return graph


def pierce_count(entities, tolerance=POINT_TOLERANCE):
    """Number of closed contours found in ``entities``."""
    graph = build_graph(entities, tolerance)
    count = graph.count_closed_loops()
    logging.debug(f"Pierce graph: {len(graph.index)} nodes, {graph.edge_count} edges, {count} closed loops")
    return count
