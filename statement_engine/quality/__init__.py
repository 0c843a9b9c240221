"""
Quality assessment module for the Statement Extraction Engine.
"""

from .assessor import TextQualityAssessor, QualityReport, QualityDetails

__all__ = [
    "TextQualityAssessor",
    "QualityReport",
    "QualityDetails",
]
