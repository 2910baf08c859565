"""
Reusable widgets for rendering change markers.
"""

from gutterdiff.ui.widgets.diff_overview import DiffOverviewBar
from gutterdiff.ui.widgets.line_number_widget import GutterMarkerWidget

__all__ = [
    'DiffOverviewBar',
    'GutterMarkerWidget',
]
