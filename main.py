import logging
import os
import sys

from PyQt6.QtWidgets import (QApplication, QMainWindow, QVBoxLayout, QHBoxLayout, QWidget, QLabel,
                             QSplitter, QLineEdit, QPushButton)
from PyQt6.QtGui import QAction, QPalette, QColor
from PyQt6.QtCore import Qt

from graph_engine import GraphEngine
from ui.fetch_worker import FetchWorker
from ui.graph_widget import GraphWidget
from ui.loading_overlay import LoadingOverlay
from ui.parameter_panel import ParameterPanel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("WikiGraph - Article Link Visualizer")
        self.resize(1200, 800)

        # State
        self.request_id = 0
        self.root_uid = None
        self.workers = {}

        # Setup Logic
        self.engine = GraphEngine()

        # Setup UI
        self.init_ui()
        self.setup_theme()

    def init_ui(self):
        # Central Widget
        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)

        # Main Layout
        self.main_layout = QVBoxLayout(self.central_widget)
        self.main_layout.setContentsMargins(10, 10, 10, 10)

        # Search form
        form_layout = QHBoxLayout()
        self.url_input = QLineEdit()
        self.url_input.setPlaceholderText("Enter Wikipedia URL (e.g., https://en.wikipedia.org/wiki/Artificial_intelligence)")
        self.url_input.returnPressed.connect(self.on_submit)
        form_layout.addWidget(self.url_input, stretch=1)

        self.btn_visualize = QPushButton("Visualize")
        self.btn_visualize.clicked.connect(self.on_submit)
        form_layout.addWidget(self.btn_visualize)
        self.main_layout.addLayout(form_layout)

        # Error banner
        self.error_label = QLabel()
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("padding: 10px; background-color: #5c1a1a; color: #ffcdd2; border-radius: 4px;")
        self.error_label.hide()
        self.main_layout.addWidget(self.error_label)

        # Info Bar
        self.info_label = QLabel("Enter an article to begin.")
        self.info_label.setStyleSheet("padding: 5px; background-color: #252526; color: #ccc; border-bottom: 1px solid #3e3e3e;")
        self.main_layout.addWidget(self.info_label)

        # Splitter: parameters | graph
        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.main_layout.addWidget(self.splitter, stretch=1)

        self.parameter_panel = ParameterPanel(self.engine.parameters)
        self.parameter_panel.parameters_changed.connect(self.on_parameters_changed)
        self.splitter.addWidget(self.parameter_panel)

        self.graph_widget = GraphWidget(self.engine)
        self.graph_widget.nodeClicked.connect(self.on_node_clicked)
        self.graph_widget.stabilized.connect(self.on_stabilized)
        self.splitter.addWidget(self.graph_widget)

        self.splitter.setStretchFactor(0, 25)
        self.splitter.setStretchFactor(1, 75)

        self.loading_overlay = LoadingOverlay(self.graph_widget)

        # Menu
        self.create_menu()

    def create_menu(self):
        menu = self.menuBar()

        file_menu = menu.addMenu("&File")
        open_action = QAction("Open Article...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.url_input.setFocus)
        file_menu.addAction(open_action)

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menu.addMenu("&View")
        reset_action = QAction("Reset View", self)
        reset_action.triggered.connect(self.graph_widget.reset_view)
        view_menu.addAction(reset_action)

        center_action = QAction("Center on Article", self)
        center_action.setShortcut("Ctrl+E")
        center_action.triggered.connect(self.center_on_article)
        view_menu.addAction(center_action)

        reheat_action = QAction("Reheat Layout", self)
        reheat_action.setShortcut("Ctrl+R")
        reheat_action.triggered.connect(self.graph_widget.reheat)
        view_menu.addAction(reheat_action)

    def setup_theme(self):
        app = QApplication.instance()
        app.setStyle("Fusion")

        palette = QPalette()
        palette.setColor(QPalette.ColorRole.Window, QColor(53, 53, 53))
        palette.setColor(QPalette.ColorRole.WindowText, Qt.GlobalColor.white)
        palette.setColor(QPalette.ColorRole.Base, QColor(25, 25, 25))
        palette.setColor(QPalette.ColorRole.AlternateBase, QColor(53, 53, 53))
        palette.setColor(QPalette.ColorRole.ToolTipBase, Qt.GlobalColor.black)
        palette.setColor(QPalette.ColorRole.ToolTipText, Qt.GlobalColor.white)
        palette.setColor(QPalette.ColorRole.Text, Qt.GlobalColor.white)
        palette.setColor(QPalette.ColorRole.Button, QColor(53, 53, 53))
        palette.setColor(QPalette.ColorRole.ButtonText, Qt.GlobalColor.white)
        palette.setColor(QPalette.ColorRole.Highlight, QColor(42, 130, 218))
        palette.setColor(QPalette.ColorRole.HighlightedText, Qt.GlobalColor.black)
        app.setPalette(palette)

    def resizeEvent(self, event):
        if hasattr(self, 'loading_overlay') and self.loading_overlay.isVisible():
            self.loading_overlay.resize(self.graph_widget.size())
        super().resizeEvent(event)

    def on_submit(self):
        reference = self.url_input.text().strip()
        if not reference:
            return

        # A newer request supersedes any fetch still in flight
        self.request_id += 1
        self.set_loading(True)
        self.error_label.hide()

        worker = FetchWorker(self.request_id, reference, self)
        worker.finished_ok.connect(self.on_article_loaded)
        worker.failed.connect(self.on_article_failed)
        worker.finished.connect(lambda rid=self.request_id: self.workers.pop(rid, None))
        self.workers[self.request_id] = worker
        worker.start()

    def set_loading(self, loading):
        self.btn_visualize.setEnabled(not loading)
        self.btn_visualize.setText("Loading..." if loading else "Visualize")

    def on_article_loaded(self, request_id, article, graph):
        if request_id != self.request_id:
            logger.info(f"Dropping stale result for '{article.title}'")
            return
        self.set_loading(False)
        self.root_uid = article.title
        self.graph_widget.set_graph(graph)
        self.info_label.setText(f"{article.title}: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} links")
        if graph.number_of_nodes():
            self.loading_overlay.start()

    def on_article_failed(self, request_id, message):
        if request_id != self.request_id:
            return
        self.set_loading(False)
        self.error_label.setText(message)
        self.error_label.show()

    def center_on_article(self):
        if self.root_uid is not None:
            self.graph_widget.center_on_node(self.root_uid)

    def on_parameters_changed(self, parameters):
        self.graph_widget.set_parameters(parameters)

    def on_stabilized(self):
        self.loading_overlay.finish()

    def on_node_clicked(self, uid):
        out_count = len(self.engine.outgoing.get(uid, []))
        in_count = len(self.engine.incoming.get(uid, []))
        self.info_label.setText(f"{uid}: links to {out_count}, linked from {in_count}")


def main():
    logging.basicConfig(level=os.environ.get("WIKIGRAPH_LOG_LEVEL", "INFO").upper())
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
