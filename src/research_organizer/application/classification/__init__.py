"""Document classification and organization."""

from .classifier import CategoryClassifier

__all__ = ["CategoryClassifier"]
