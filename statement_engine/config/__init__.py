"""
Configuration module for the Statement Extraction Engine.

This module contains the extraction settings dictionary, the immutable
ExtractionConfig bundle and the category table loader.
"""

from .extraction_config import EXTRACTION_CONFIG, ExtractionConfig, DEFAULT_CONFIG
from .category_loader import load_category_keywords_csv

__all__ = [
    "EXTRACTION_CONFIG",
    "ExtractionConfig",
    "DEFAULT_CONFIG",
    "load_category_keywords_csv",
]
