"""Breadth-first cascade propagation over operational edges."""

from collections import deque
from typing import Callable, Dict, List, Optional
import logging

from .config import EngineConfig
from .effects import EffectiveNetwork
from .events import EventLogEntry, EventType, Severity
from .models import GridEdge, GridNode, NodeStatus

logger = logging.getLogger("gridcase.cascade")


class CascadePropagator:
    """Spreads a node failure to its neighbours.

    Adjacency is built once per run from the operational edges, in edge list
    order, so neighbours are always examined in the same order and the
    random stream is consumed identically on every run.
    """

    def __init__(self, effective: EffectiveNetwork, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self._nodes: Dict[str, GridNode] = {n.id: n for n in effective.nodes}
        self._resistance = effective.cascade_resistance
        self._adjacency: Dict[str, List[GridEdge]] = {}

        for edge in effective.edges:
            if edge.status != NodeStatus.OPERATIONAL:
                continue
            self._adjacency.setdefault(edge.from_node_id, []).append(edge)
            if edge.to_node_id != edge.from_node_id:
                self._adjacency.setdefault(edge.to_node_id, []).append(edge)

    def failure_probability(self, node: GridNode) -> float:
        """Chance that ``node`` fails when a neighbour fails."""
        if node.critical:
            base = self.config.critical_cascade_probability
        else:
            base = self.config.cascade_probability
        return base * (1 - self._resistance.get(node.id, 0.0))

    def propagate(
        self,
        origin_id: str,
        hour: int,
        statuses: Dict[str, NodeStatus],
        failed_at: Dict[str, int],
        rng: Callable[[], float],
        event_log: List[EventLogEntry]
    ) -> List[str]:
        """Run one cascade sweep from ``origin_id``.

        Mutates ``statuses``, ``failed_at`` and ``event_log`` for every node
        it fails and returns their ids in failure order. Already-failed and
        unknown neighbours are skipped without drawing; every other
        neighbour examined consumes exactly one draw.
        """
        queue = deque([origin_id])
        visited = set()
        newly_failed: List[str] = []

        while queue:
            current_id = queue.popleft()
            if current_id in visited:
                continue
            visited.add(current_id)

            for edge in self._adjacency.get(current_id, []):
                neighbor_id = edge.other_end(current_id)
                if statuses.get(neighbor_id) == NodeStatus.FAILED:
                    continue

                neighbor = self._nodes.get(neighbor_id)
                if neighbor is None:
                    continue

                if rng() < self.failure_probability(neighbor):
                    statuses[neighbor_id] = NodeStatus.FAILED
                    failed_at[neighbor_id] = hour
                    newly_failed.append(neighbor_id)
                    event_log.append(EventLogEntry(
                        hour=hour,
                        type=EventType.CASCADE_FAIL,
                        node_id=neighbor_id,
                        from_node_id=current_id,
                        message=f"Cascade failure: {neighbor.label} failed due to overload from upstream failure",
                        severity=Severity.CRITICAL,
                    ))
                    logger.debug(f"Hour {hour}: cascade {current_id} -> {neighbor_id}")
                    queue.append(neighbor_id)

        return newly_failed
