from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QSlider, QPushButton
from PyQt6.QtCore import Qt, pyqtSignal

from graph_engine import SimulationParameters

# field, label, slider min, slider max, slider units per parameter unit
SLIDERS = [
    ("link_distance", "Link distance", 10, 600, 1),
    ("charge_strength", "Charge", -500, 100, 1),
    ("collision_radius", "Collision radius", 0, 60, 1),
    ("collision_strength", "Collision strength", 0, 100, 100),
    ("velocity_decay", "Velocity decay", 0, 100, 100),
    ("alpha_decay", "Alpha decay", 1, 99, 100),
]


class ParameterPanel(QWidget):
    parameters_changed = pyqtSignal(object) # SimulationParameters

    def __init__(self, parameters=None, parent=None):
        super().__init__(parent)
        self.parameters = parameters or SimulationParameters()
        self.sliders = {}
        self.value_labels = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)

        for name, text, lo, hi, units in SLIDERS:
            row = QHBoxLayout()
            row.addWidget(QLabel(text))

            slider = QSlider(Qt.Orientation.Horizontal)
            slider.setRange(lo, hi)
            slider.setValue(round(getattr(self.parameters, name) * units))
            slider.valueChanged.connect(lambda value, name=name, units=units: self.on_slider(name, value / units))
            row.addWidget(slider, stretch=1)

            value_label = QLabel(self._format(getattr(self.parameters, name)))
            value_label.setMinimumWidth(50)
            row.addWidget(value_label)

            self.sliders[name] = slider
            self.value_labels[name] = value_label
            layout.addLayout(row)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        self.btn_reset = QPushButton("Reset")
        self.btn_reset.clicked.connect(self.reset)
        btn_layout.addWidget(self.btn_reset)
        layout.addLayout(btn_layout)
        layout.addStretch()

        self.setStyleSheet("""
            QLabel { color: #ccc; }
            QPushButton { background-color: #0d47a1; color: white; padding: 5px 15px; border: none; }
            QPushButton:hover { background-color: #1565c0; }
        """)

    @staticmethod
    def _format(value):
        return f"{value:g}"

    def on_slider(self, name, value):
        self.parameters = self.parameters.with_changes(**{name: value})
        self.value_labels[name].setText(self._format(value))
        self.parameters_changed.emit(self.parameters)

    def reset(self):
        defaults = SimulationParameters()
        for name, _, _, _, units in SLIDERS:
            slider = self.sliders[name]
            slider.blockSignals(True)
            slider.setValue(round(getattr(defaults, name) * units))
            slider.blockSignals(False)
            self.value_labels[name].setText(self._format(getattr(defaults, name)))
        self.parameters = defaults
        self.parameters_changed.emit(self.parameters)
