import enum
import logging
import math
import random
from dataclasses import dataclass, field, replace
from typing import Optional

from errors import MalformedInput

logger = logging.getLogger(__name__)

# Alpha the layout is pushed back up to when a node is grabbed or a slider moves
REHEAT_ALPHA = 0.3


@dataclass(frozen=True)
class SimulationParameters:
    """Physics knobs. Replaced wholesale, never mutated in place."""
    link_distance: float = 300.0
    link_strength: Optional[float] = None  # None: 1 / min(degree(u), degree(v))
    charge_strength: float = -50.0
    charge_distance_min: float = 1.0
    collision_radius: float = 15.0
    collision_strength: float = 0.5
    center_strength: float = 1.0
    velocity_decay: float = 0.5
    alpha_decay: float = 0.2
    alpha_min: float = 0.001

    def __post_init__(self):
        self.validate()

    def validate(self):
        if not self.link_distance > 0:
            raise MalformedInput("link_distance must be positive")
        if self.link_strength is not None and self.link_strength < 0:
            raise MalformedInput("link_strength must be non-negative")
        if not self.charge_distance_min > 0:
            raise MalformedInput("charge_distance_min must be positive")
        if self.collision_radius < 0:
            raise MalformedInput("collision_radius must be non-negative")
        if not 0 <= self.collision_strength <= 1:
            raise MalformedInput("collision_strength must be in [0, 1]")
        if not 0 <= self.center_strength <= 1:
            raise MalformedInput("center_strength must be in [0, 1]")
        if not 0 <= self.velocity_decay <= 1:
            raise MalformedInput("velocity_decay must be in [0, 1]")
        if not 0 < self.alpha_decay < 1:
            raise MalformedInput("alpha_decay must be in (0, 1)")
        if not 0 < self.alpha_min < 1:
            raise MalformedInput("alpha_min must be in (0, 1)")
        for name in ("link_distance", "charge_strength", "collision_radius"):
            if not math.isfinite(getattr(self, name)):
                raise MalformedInput(f"{name} must be finite")

    def with_changes(self, **changes):
        return replace(self, **changes)


class SimulationState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    SETTLED = "settled"


class SimNode:
    def __init__(self, uid, label, x, y, data=None):
        self.uid = uid
        self.label = label
        self.data = data or {}
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0
        # Free <-> pinned. fx/fy only mean something while pinned is True.
        self.pinned = False
        self.fx = 0.0
        self.fy = 0.0

    def pin(self, x, y):
        self.pinned = True
        self.fx = x
        self.fy = y

    def unpin(self):
        self.pinned = False


@dataclass(frozen=True)
class TickSnapshot:
    positions: dict = field(default_factory=dict)  # uid -> (x, y), graph order
    alpha: float = 0.0
    stabilized: bool = False


class GraphEngine:
    """Force-directed layout: link springs, many-body charge, collision and centering.

    The host calls ``tick()`` once per frame. Nothing in here blocks or does I/O.
    """

    def __init__(self, parameters=None, seed=None, rng=None):
        self.parameters = parameters or SimulationParameters()
        self.rng = rng or random.Random(seed)
        self.initial_spread = 100.0

        self.nodes = {}  # uid -> SimNode
        self.edges = []  # (uid1, uid2)
        self.incoming = {}  # uid -> [uids]
        self.outgoing = {}  # uid -> [uids]

        self.state = SimulationState.UNINITIALIZED
        self.alpha = 0.0
        self.alpha_target = 0.0
        self.generation = 0
        self.tick_count = 0

        self._degree = {}
        self._pending = {}  # uid -> (x, y) to pin, or None to unpin
        self._stabilized_callbacks = []
        self._stabilized_fired = False

    def load_from_networkx(self, nx_graph):
        """Replaces the whole simulation with a fresh layout of ``nx_graph``."""
        self.generation += 1
        self.tick_count = 0
        self.nodes = {}
        self.edges = []
        self.incoming = {}
        self.outgoing = {}
        self._degree = {}
        self._pending = {}
        self._stabilized_fired = False

        spread = self.initial_spread
        for n, data in nx_graph.nodes(data=True):
            x = self.rng.uniform(-spread, spread)
            y = self.rng.uniform(-spread, spread)
            self.nodes[n] = SimNode(n, data.get('label', n), x, y, data)
            self.incoming[n] = []
            self.outgoing[n] = []
            self._degree[n] = 0

        for u, v in nx_graph.edges():
            self.outgoing[u].append(v)
            self.incoming[v].append(u)
            if u == v:
                continue  # self-loops carry no spring
            self.edges.append((u, v))
            self._degree[u] += 1
            self._degree[v] += 1

        self.alpha_target = 0.0
        if self.nodes:
            self.alpha = 1.0
            self.state = SimulationState.RUNNING
        else:
            self.alpha = 0.0
            self.state = SimulationState.UNINITIALIZED

        logger.info(f"Loaded graph: {len(self.nodes)} nodes, {len(self.edges)} edges (generation {self.generation})")

    # --- Control -------------------------------------------------------

    def on_stabilized(self, callback):
        self._stabilized_callbacks.append(callback)

    def set_parameters(self, parameters, alpha=REHEAT_ALPHA):
        self.parameters = parameters
        self.reheat(max(self.alpha, alpha))

    def reheat(self, alpha=1.0):
        """Puts energy back into the layout so it moves again."""
        if self.state == SimulationState.UNINITIALIZED:
            return
        self.alpha = alpha
        self._resume()
        logger.debug(f"Reheated to alpha={alpha:.3f}")

    def set_alpha_target(self, target):
        self.alpha_target = target
        if target >= self.parameters.alpha_min:
            self._resume()

    def _resume(self):
        if self.state == SimulationState.SETTLED:
            self.state = SimulationState.RUNNING
            self._stabilized_fired = False

    def request_pin(self, uid, x, y):
        """Latched: the node snaps to (x, y) at the start of the next tick."""
        if uid not in self.nodes:
            logger.debug(f"Ignoring pin for unknown node {uid!r}")
            return
        self._pending[uid] = (x, y)

    def request_unpin(self, uid):
        if uid not in self.nodes:
            logger.debug(f"Ignoring unpin for unknown node {uid!r}")
            return
        self._pending[uid] = None

    # --- Simulation ----------------------------------------------------

    @property
    def stabilized(self):
        return self.state == SimulationState.SETTLED

    def positions(self):
        return {uid: (n.x, n.y) for uid, n in self.nodes.items()}

    def snapshot(self):
        return TickSnapshot(self.positions(), self.alpha, self.stabilized)

    def tick(self):
        """Advances the layout by one step and returns the resulting positions."""
        self._apply_pending()
        if self.state != SimulationState.RUNNING:
            return self.snapshot()

        params = self.parameters
        node_items = list(self.nodes.values())

        # 1. Springs (Edges)
        self._apply_links(params)

        # 2. Many-body charge (All vs All)
        # O(N^2) is fine for the graph sizes we render (< a few hundred nodes)
        if params.charge_strength:
            self._apply_charge(node_items, params)

        # 3. Collision
        if params.collision_radius > 0 and params.collision_strength > 0:
            self._apply_collision(node_items, params)

        # 4. Centering (drift the centroid toward the origin)
        if params.center_strength:
            self._apply_center(node_items, params)

        # 5. Integration
        keep = 1.0 - params.velocity_decay
        for n in node_items:
            if n.pinned:
                n.x, n.y = n.fx, n.fy
                n.vx = n.vy = 0.0
                continue
            n.vx *= keep
            n.vy *= keep
            n.x += n.vx * self.alpha
            n.y += n.vy * self.alpha

        # 6. Cooling
        self.alpha += (self.alpha_target - self.alpha) * params.alpha_decay
        self.tick_count += 1

        if self.alpha < params.alpha_min and self.alpha_target < params.alpha_min:
            self._settle()

        return self.snapshot()

    def _apply_pending(self):
        if not self._pending:
            return
        pending, self._pending = self._pending, {}
        for uid, pos in pending.items():
            node = self.nodes[uid]
            if pos is None:
                node.unpin()
            else:
                node.pin(*pos)
                node.x, node.y = pos
                node.vx = node.vy = 0.0

    def _jiggle(self):
        return (self.rng.random() - 0.5) * 1e-6

    def _apply_links(self, params):
        for u, v in self.edges:
            n1 = self.nodes[u]
            n2 = self.nodes[v]
            d1 = self._degree[u]
            d2 = self._degree[v]

            dx = n2.x - n1.x
            dy = n2.y - n1.y
            if dx == 0 and dy == 0:
                dx, dy = self._jiggle(), self._jiggle()
            dist = math.sqrt(dx*dx + dy*dy)

            strength = params.link_strength
            if strength is None:
                strength = 1.0 / min(d1, d2)

            # F = k * (current_dist - target_dist), split by degree
            f = (dist - params.link_distance) / dist * strength
            dx *= f
            dy *= f
            bias = d1 / (d1 + d2)

            n2.vx -= dx * bias
            n2.vy -= dy * bias
            n1.vx += dx * (1 - bias)
            n1.vy += dy * (1 - bias)

    def _apply_charge(self, node_items, params):
        dmin2 = params.charge_distance_min ** 2
        for i in range(len(node_items)):
            n1 = node_items[i]
            for j in range(i + 1, len(node_items)):
                n2 = node_items[j]

                dx = n2.x - n1.x
                dy = n2.y - n1.y
                if dx == 0 and dy == 0:
                    dx, dy = self._jiggle(), self._jiggle()
                dist_sq = dx*dx + dy*dy
                if dist_sq < dmin2:
                    dist_sq = math.sqrt(dmin2 * dist_sq)

                # |F| = strength / dist
                w = params.charge_strength / dist_sq
                n1.vx += dx * w
                n1.vy += dy * w
                n2.vx -= dx * w
                n2.vy -= dy * w

    def _apply_collision(self, node_items, params):
        r = params.collision_radius * 2
        r_sq = r * r
        for i in range(len(node_items)):
            n1 = node_items[i]
            for j in range(i + 1, len(node_items)):
                n2 = node_items[j]

                dx = n1.x - n2.x
                dy = n1.y - n2.y
                dist_sq = dx*dx + dy*dy
                if dist_sq >= r_sq:
                    continue
                if dist_sq == 0:
                    dx, dy = self._jiggle(), self._jiggle()
                    dist_sq = dx*dx + dy*dy

                dist = math.sqrt(dist_sq)
                f = (r - dist) / dist * params.collision_strength * 0.5
                n1.vx += dx * f
                n1.vy += dy * f
                n2.vx -= dx * f
                n2.vy -= dy * f

    def _apply_center(self, node_items, params):
        count = len(node_items)
        cx = sum(n.x for n in node_items) / count
        cy = sum(n.y for n in node_items) / count
        for n in node_items:
            n.vx -= cx * params.center_strength
            n.vy -= cy * params.center_strength

    def _settle(self):
        self.state = SimulationState.SETTLED
        if self._stabilized_fired:
            return
        self._stabilized_fired = True
        logger.info(f"Layout settled after {self.tick_count} ticks")
        for callback in list(self._stabilized_callbacks):
            callback(self.snapshot())
