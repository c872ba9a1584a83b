from .chart import DEFAULT_STYLE, ChartStyle, Surface, render_chart
from .table import MAX_ROWS, PLACEHOLDER, TableView, render_table
from .text_canvas import TERMINAL_STYLE, rasterize
from .view import PresentationCommands, ViewModel, render

__all__ = [
    "DEFAULT_STYLE",
    "MAX_ROWS",
    "PLACEHOLDER",
    "TERMINAL_STYLE",
    "ChartStyle",
    "PresentationCommands",
    "Surface",
    "TableView",
    "ViewModel",
    "rasterize",
    "render",
    "render_chart",
    "render_table",
]
