from PyQt6.QtWidgets import QWidget, QLabel, QVBoxLayout, QGraphicsOpacityEffect
from PyQt6.QtCore import Qt, QPropertyAnimation, QEasingCurve
from PyQt6.QtGui import QFont


class LoadingOverlay(QWidget):
    """'Loading graph...' banner over the graph until the layout settles."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents) # Click through
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground)
        self.setStyleSheet("background-color: rgba(18, 18, 18, 160); color: #00bcd4;")

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.label = QLabel("Loading graph...")
        self.label.setFont(QFont("Segoe UI", 16, QFont.Weight.Bold))
        self.label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.label)

        # windowOpacity only applies to top-level windows; a child fades through an effect
        self.effect = QGraphicsOpacityEffect(self)
        self.effect.setOpacity(1.0)
        self.setGraphicsEffect(self.effect)

        self.anim = None
        self.hide()

    def start(self, text="Loading graph..."):
        if self.anim:
            self.anim.stop()
        self.label.setText(text)
        self.effect.setOpacity(1.0)
        self.resize(self.parentWidget().size())
        self.raise_()
        self.show()

    def finish(self):
        if not self.isVisible():
            return
        self.anim = QPropertyAnimation(self.effect, b"opacity", self)
        self.anim.setDuration(400)
        self.anim.setStartValue(1.0)
        self.anim.setEndValue(0.0)
        self.anim.setEasingCurve(QEasingCurve.Type.OutQuad)
        self.anim.finished.connect(self.hide)
        self.anim.start()
