import logging

from PyQt6.QtCore import QThread, pyqtSignal

from errors import WikiGraphError
from wikipedia import load_article_graph

logger = logging.getLogger(__name__)


class FetchWorker(QThread):
    """Fetches an article and builds its graph off the GUI thread."""
    finished_ok = pyqtSignal(int, object, object) # request id, ArticleRecord, nx.DiGraph
    failed = pyqtSignal(int, str) # request id, message

    def __init__(self, request_id, reference, parent=None):
        super().__init__(parent)
        self.request_id = request_id
        self.reference = reference

    def run(self):
        try:
            article, graph = load_article_graph(self.reference)
        except WikiGraphError as e:
            self.failed.emit(self.request_id, str(e))
            return
        except Exception as e:
            # The shell must always hear back, or the form stays stuck on "Loading..."
            logger.exception(f"Unexpected failure fetching {self.reference!r}")
            self.failed.emit(self.request_id, f"Failed to fetch article: {e}")
            return
        self.finished_ok.emit(self.request_id, article, graph)
