"""Analyzer contract and the errors analyzers raise."""

from abc import ABC, abstractmethod
from typing import Any


class AnalyzerError(Exception):
    """Base exception for analysis errors."""

    pass


class UnresolvableModelError(AnalyzerError):
    """The reference does not name a concrete, analyzable model type."""

    pass


class SchemaUnavailableError(AnalyzerError):
    """The backend schema cannot be reached (or, in strict mode, a table is missing)."""

    pass


class Analyzer(ABC):
    """Turns host reflection data into intermediate descriptors."""

    @abstractmethod
    def analyze(self, subject: Any) -> Any:
        """Analyze ``subject`` and return its descriptor."""
        pass

    @abstractmethod
    def can_analyze(self, subject: Any) -> bool:
        """Return True if ``subject`` has a shape this analyzer understands."""
        pass
