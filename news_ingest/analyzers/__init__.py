"""Model-driven analysis of scraped items."""

from .classifier import Classifier, paragraphs_to_markup

__all__ = ["Classifier", "paragraphs_to_markup"]
