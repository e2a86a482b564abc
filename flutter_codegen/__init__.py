"""Flutter client code generation from backend models and routes."""

__version__ = "0.1.0"
