from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import QTimer, Qt, QPointF, QRectF, pyqtSignal
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QFont, QTransform

from graph_engine import SimulationState
from interaction import InteractionController, ViewTransform


class GraphWidget(QWidget):
    nodeClicked = pyqtSignal(str)
    stabilized = pyqtSignal()

    def __init__(self, engine, parent=None):
        super().__init__(parent)
        self.engine = engine
        self.engine.on_stabilized(self._on_engine_stabilized)
        self.controller = InteractionController(engine)

        # Rendering settings
        self.node_radius = 8
        self.node_color = QColor("#00bcd4") # Cyan
        self.root_color = QColor("#ff9800") # Orange
        self.label_color = QColor("#dddddd")
        self.edge_color = QColor("#555555")
        self.bg_color = QColor("#121212")
        self.placeholder = "Enter a Wikipedia URL to visualize its article graph"

        # Camera
        self.view = ViewTransform(min_scale=0.1, max_scale=4.0)

        # Interaction
        self.panning = False
        self.last_mouse_pos = QPointF()

        # Physics Timer
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.physics_loop)

        self.setMouseTracking(True)

    def set_graph(self, nx_graph):
        """Drops the current layout and starts a new one for ``nx_graph``."""
        self.controller.dragging = None
        self.engine.load_from_networkx(nx_graph)
        self.view.reset()
        self.ensure_running()
        self.update()

    def set_parameters(self, parameters):
        self.engine.set_parameters(parameters)
        self.ensure_running()

    def reheat(self):
        self.engine.reheat(1.0)
        self.ensure_running()

    def ensure_running(self):
        if self.engine.state == SimulationState.RUNNING and not self.timer.isActive():
            self.timer.start(16) # ~60 FPS

    def physics_loop(self):
        # The loop only ever advances the engine's current graph; once it
        # settles the timer stops until something reheats it.
        if self.engine.state != SimulationState.RUNNING:
            self.timer.stop()
            return
        self.engine.tick()
        self.update()

    def _on_engine_stabilized(self, snapshot):
        self.stabilized.emit()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        # Fill Background
        painter.fillRect(self.rect(), self.bg_color)

        if not self.engine.nodes:
            painter.setPen(QColor("#888888"))
            painter.drawText(QRectF(self.rect()), Qt.AlignmentFlag.AlignCenter, self.placeholder)
            return

        # Apply Camera Transform to the whole scene
        transform = QTransform()
        center_x = self.width() / 2
        center_y = self.height() / 2

        transform.translate(center_x + self.view.translate_x, center_y + self.view.translate_y)
        transform.scale(self.view.scale, self.view.scale)
        painter.setTransform(transform)

        # Draw Edges
        painter.setPen(QPen(self.edge_color, 1.5))
        for u, v in self.engine.edges:
            n1 = self.engine.nodes[u]
            n2 = self.engine.nodes[v]
            painter.drawLine(QPointF(n1.x, n1.y), QPointF(n2.x, n2.y))

        # Draw Nodes
        painter.setPen(Qt.PenStyle.NoPen)
        for node in self.engine.nodes.values():
            color = self.root_color if node.data.get('root') else self.node_color
            painter.setBrush(QBrush(color))
            painter.drawEllipse(QPointF(node.x, node.y), self.node_radius, self.node_radius)

        # Labels above the nodes
        painter.setFont(QFont("Segoe UI", 9))
        painter.setPen(self.label_color)
        for node in self.engine.nodes.values():
            painter.drawText(QRectF(node.x - 80, node.y - self.node_radius - 20, 160, 16),
                             Qt.AlignmentFlag.AlignCenter, node.label)

    def mousePressEvent(self, event):
        mouse_pos = event.position()

        if event.button() == Qt.MouseButton.LeftButton:
            world_pos = self.screen_to_world(mouse_pos)
            uid = self.controller.hit_test(world_pos, self.node_radius)
            if uid is not None:
                self.controller.begin_drag(uid, world_pos)
                self.ensure_running()
                self.setCursor(Qt.CursorShape.ClosedHandCursor)
                self.nodeClicked.emit(uid)
                return

        if event.button() in (Qt.MouseButton.LeftButton, Qt.MouseButton.RightButton):
            # Empty space (or right button): pan the camera
            self.panning = True
            self.last_mouse_pos = mouse_pos
            self.setCursor(Qt.CursorShape.SizeAllCursor)

    def mouseMoveEvent(self, event):
        mouse_pos = event.position()

        if self.panning:
            delta = mouse_pos - self.last_mouse_pos
            self.view.pan(delta.x(), delta.y())
            self.last_mouse_pos = mouse_pos
            self.update()

        elif self.controller.dragging is not None:
            world_pos = self.screen_to_world(mouse_pos)
            self.controller.update_drag(self.controller.dragging, world_pos)
            self.ensure_running()

        else:
            uid = self.controller.hit_test(self.screen_to_world(mouse_pos), self.node_radius)
            self.setToolTip(self.engine.nodes[uid].label if uid is not None else "")

    def mouseReleaseEvent(self, event):
        if self.controller.dragging is not None:
            self.controller.end_drag(self.controller.dragging)
        self.panning = False
        self.setCursor(Qt.CursorShape.ArrowCursor)

    def wheelEvent(self, event):
        # Zoom around the cursor
        angle = event.angleDelta().y()
        factor = 1.1 if angle > 0 else 0.9
        pos = event.position()
        self.view.zoom(factor, anchor=(pos.x() - self.width() / 2, pos.y() - self.height() / 2))
        self.update()

    def screen_to_world(self, screen_pos):
        # The painter adds the widget center on top of the view translation
        center_x = self.width() / 2
        center_y = self.height() / 2
        return self.view.screen_to_world((screen_pos.x() - center_x, screen_pos.y() - center_y))

    def center_on_node(self, uid):
        node = self.engine.nodes.get(uid)
        if node:
            self.view.center_on(node.x, node.y)
            self.update()

    def reset_view(self):
        self.view.reset()
        self.update()
