"""
Value objects flowing through the extraction pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..quality.assessor import QualityReport


class TransactionType(Enum):
    """Direction of money flow."""
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Candidate:
    """A raw pattern match, before validation and normalization."""
    raw_description: str
    raw_amount: str
    raw_date: Optional[str]
    pattern_id: int
    confidence: float
    pattern_name: str = ""
    layout: str = "inline"
    source_line: str = ""

    @property
    def signed_amount(self) -> Optional[float]:
        """Amount as matched, with its sign; None when unparseable."""
        cleaned = self.raw_amount.replace("$", "").replace(",", "").strip()
        negative = "-" in cleaned
        cleaned = cleaned.replace("-", "")
        try:
            value = float(cleaned)
        except ValueError:
            return None
        return -value if negative else value


@dataclass(frozen=True)
class Transaction:
    """Canonical transaction record."""
    date: str
    description: str
    amount: float
    type: TransactionType
    category: str
    confidence: float

    def to_dict(self) -> Dict:
        return {
            "date": self.date,
            "description": self.description,
            "amount": round(self.amount, 2),
            "type": self.type.value,
            "category": self.category,
            "confidence": self.confidence,
        }


@dataclass
class ExtractionResult:
    """Transactions in discovery order plus the advisory quality report."""
    transactions: List[Transaction] = field(default_factory=list)
    quality_report: Optional[QualityReport] = None
    used_fallback: bool = False

    def to_dict(self) -> Dict:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "quality": self.quality_report.to_dict() if self.quality_report else None,
        }
