"""User interface components"""

from .progress import ProgressTracker, NullProgress
from .renderer import ReportRenderer, ConsoleRenderer

__all__ = [
    "ProgressTracker",
    "NullProgress",
    "ReportRenderer",
    "ConsoleRenderer",
]
