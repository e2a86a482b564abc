"""
Flutter/Dart generators.

One generator per artifact category: data classes, API services,
widgets, screens and the shared ``api_service.dart`` transport.
"""

from .api_base import ApiClientBaseGenerator
from .base import TEMPLATE_DIR, DartGenerator
from .model import DartModelGenerator
from .screen import SCREEN_TYPES, ScreenGenerator
from .service import ApiServiceGenerator
from .widget import WIDGET_TYPES, WidgetGenerator

__all__ = [
    "ApiClientBaseGenerator",
    "ApiServiceGenerator",
    "DartGenerator",
    "DartModelGenerator",
    "SCREEN_TYPES",
    "ScreenGenerator",
    "TEMPLATE_DIR",
    "WIDGET_TYPES",
    "WidgetGenerator",
]
