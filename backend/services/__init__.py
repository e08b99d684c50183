"""Services module - Business logic layer"""

from .config_manager import ConfigManager
from .diff_generator import DiffGenerator, compute_diff
from .html_renderer import render_diff_table
from .performance import ImageProcessingQueue, PerformanceMonitor

__all__ = [
    "ConfigManager",
    "DiffGenerator",
    "compute_diff",
    "render_diff_table",
    "ImageProcessingQueue",
    "PerformanceMonitor",
]
