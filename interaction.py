import logging
import math

from graph_engine import REHEAT_ALPHA

logger = logging.getLogger(__name__)


class InteractionController:
    """Turns pointer drags into pins on the engine.

    Every write goes through the engine's latched pin requests, so a drag
    update never lands in the middle of a tick.
    """

    def __init__(self, engine, drag_alpha_target=REHEAT_ALPHA):
        self.engine = engine
        self.drag_alpha_target = drag_alpha_target
        self.dragging = None

    def begin_drag(self, uid, pointer_pos):
        node = self.engine.nodes.get(uid)
        if node is None:
            return False

        self.dragging = uid
        # Pin where the node is now; the pointer takes over on the first update
        self.engine.request_pin(uid, node.x, node.y)
        self.engine.set_alpha_target(self.drag_alpha_target)
        if self.engine.alpha < self.drag_alpha_target:
            self.engine.reheat(self.drag_alpha_target)
        logger.debug(f"Drag start on {uid!r} at {pointer_pos}")
        return True

    def update_drag(self, uid, pointer_pos):
        if uid is None or uid != self.dragging:
            return False
        x, y = pointer_pos
        self.engine.request_pin(uid, x, y)
        return True

    def end_drag(self, uid):
        if uid is None or uid != self.dragging:
            return False
        self.engine.request_unpin(uid)
        self.engine.set_alpha_target(0.0)
        self.dragging = None
        logger.debug(f"Drag end on {uid!r}")
        return True

    def hit_test(self, world_pos, radius):
        """Topmost node under ``world_pos``. Nodes drawn last are on top."""
        wx, wy = world_pos
        for node in reversed(list(self.engine.nodes.values())):
            dx = wx - node.x
            dy = wy - node.y
            if math.sqrt(dx*dx + dy*dy) <= radius:
                return node.uid
        return None


class ViewTransform:
    """Camera over the scene: screen = world * scale + translate.

    Pure view state; the engine's coordinates are never touched.
    """

    def __init__(self, min_scale=0.1, max_scale=4.0):
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.reset()

    def reset(self):
        self.translate_x = 0.0
        self.translate_y = 0.0
        self.scale = 1.0

    def pan(self, dx, dy):
        self.translate_x += dx
        self.translate_y += dy

    def set_scale(self, scale):
        self.scale = min(self.max_scale, max(self.min_scale, scale))

    def zoom(self, factor, anchor=None):
        """Scales by ``factor``, keeping the world point under ``anchor`` in place."""
        if anchor is None:
            anchor = (0.0, 0.0)
        wx, wy = self.screen_to_world(anchor)
        self.set_scale(self.scale * factor)
        self.translate_x = anchor[0] - wx * self.scale
        self.translate_y = anchor[1] - wy * self.scale

    def screen_to_world(self, screen_pos):
        # world = (screen - translate) / scale
        sx, sy = screen_pos
        return ((sx - self.translate_x) / self.scale,
                (sy - self.translate_y) / self.scale)

    def world_to_screen(self, world_pos):
        wx, wy = world_pos
        return (wx * self.scale + self.translate_x,
                wy * self.scale + self.translate_y)

    def center_on(self, wx, wy):
        self.translate_x = -wx * self.scale
        self.translate_y = -wy * self.scale

    def as_dict(self):
        return {'translate_x': self.translate_x, 'translate_y': self.translate_y, 'scale': self.scale}
