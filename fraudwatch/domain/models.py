"""Domain models - pure Python dataclasses representing monitoring entities"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple

# Risk tiers
HIGH = "high"
MEDIUM = "medium"
LOW = "low"
RISK_LEVELS = (HIGH, MEDIUM, LOW)


@dataclass(frozen=True)
class Transaction:
    """Card transaction as produced by the generator or the API adapter"""

    transaction_id: str
    amount_cents: int
    merchant_name: str
    merchant_category: str
    location: str  # "City, Region/Country"
    card_number: str  # masked, last 4 chars are digits
    timestamp: datetime


@dataclass(frozen=True)
class RuleOutcome:
    """Raw output of the rule battery before tier mapping"""

    score: int
    risk_factors: Tuple[str, ...]


@dataclass(frozen=True)
class FraudAssessment:
    """Output of risk assessment"""

    risk_level: str  # "high" | "medium" | "low"
    reasoning: str
    risk_factors: Tuple[str, ...]
    confidence: float


@dataclass
class MonitoredTransaction:
    """Transaction tracked by the live feed along with its review status"""

    transaction: Transaction
    assessment: FraudAssessment
    risk_level: str  # starts at the assessed tier, analysts may override
    status: str = "pending"  # pending | approved | flagged | blocked

    @property
    def transaction_id(self) -> str:
        return self.transaction.transaction_id


@dataclass
class LiveAlert:
    """Alert raised by the live feed for a risky transaction"""

    alert_id: str
    alert_type: str  # fraud | anomaly | velocity | geographic | amount
    severity: str  # critical | high | medium | low
    title: str
    message: str
    created_at: datetime
    transaction_id: str
    amount_cents: int
    location: str
    confidence: float


@dataclass
class LiveStats:
    """Rolling statistics over the live feed buffer"""

    total_transactions: int = 0
    fraud_detected: int = 0
    total_amount_cents: int = 0
    average_amount_cents: int = 0
    risk_index: float = 2.3
    accuracy: float = 97.8
    transactions_per_second: int = 0
    blocked_transactions: int = 0
    flagged_transactions: int = 0
    approved_transactions: int = 0


@dataclass
class FeedSnapshot:
    """What subscribers of the live feed receive"""

    transactions: List[MonitoredTransaction] = field(default_factory=list)
    alerts: List[LiveAlert] = field(default_factory=list)
    stats: LiveStats = field(default_factory=LiveStats)
