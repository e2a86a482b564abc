"""Analyzers that read backend models and routes into descriptors."""

from .base import (
    Analyzer,
    AnalyzerError,
    SchemaUnavailableError,
    UnresolvableModelError,
)
from .model_analyzer import ModelAnalyzer
from .route_analyzer import RouteAnalyzer

__all__ = [
    "Analyzer",
    "AnalyzerError",
    "ModelAnalyzer",
    "RouteAnalyzer",
    "SchemaUnavailableError",
    "UnresolvableModelError",
]
