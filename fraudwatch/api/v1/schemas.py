"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from fraudwatch.domain.models import (
    FraudAssessment,
    LiveAlert,
    LiveStats,
    MonitoredTransaction,
    Transaction,
)
from fraudwatch.infrastructure.database.models import AssessedTransaction
from fraudwatch.utils.money import MAX_AMOUNT, cents_to_decimal, to_cents


class TransactionRequest(BaseModel):
    """Request body for POST /v1/analyze-transaction"""

    transaction_id: str = Field(..., min_length=1, description="Transaction identifier")
    amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT, decimal_places=2, description="Amount in currency units, at most two decimal places")
    merchant_name: str
    merchant_category: str
    location: str = Field(..., description="City, Region/Country")
    card_number: str = Field(..., pattern=r"^.*\d{4}$", description="Masked card number ending in 4 digits")
    timestamp: datetime

    def to_domain(self) -> Transaction:
        return Transaction(
            transaction_id=self.transaction_id,
            amount_cents=to_cents(self.amount),
            merchant_name=self.merchant_name,
            merchant_category=self.merchant_category,
            location=self.location,
            card_number=self.card_number,
            timestamp=self.timestamp,
        )


class AssessmentSchema(BaseModel):
    """Fraud assessment for a single transaction"""

    risk_level: str
    reasoning: str
    risk_factors: List[str]
    confidence: float

    @classmethod
    def from_domain(cls, assessment: FraudAssessment) -> "AssessmentSchema":
        return cls(
            risk_level=assessment.risk_level,
            reasoning=assessment.reasoning,
            risk_factors=list(assessment.risk_factors),
            confidence=assessment.confidence,
        )


class AnalyzeResponse(BaseModel):
    """Response for POST /v1/analyze-transaction"""

    success: bool = True
    analysis: AssessmentSchema


class TransactionRecord(BaseModel):
    """Stored transaction with its assessment"""

    transaction_id: str
    amount: Decimal
    merchant_name: str
    merchant_category: str
    location: str
    card_number: str
    timestamp: datetime
    status: str
    analysis: AssessmentSchema

    @classmethod
    def from_record(cls, record: AssessedTransaction) -> "TransactionRecord":
        return cls(
            transaction_id=record.transaction_id,
            amount=cents_to_decimal(record.amount_cents),
            merchant_name=record.merchant_name,
            merchant_category=record.merchant_category,
            location=record.location,
            card_number=record.card_number,
            timestamp=record.occurred_at,
            status=record.status,
            analysis=AssessmentSchema(
                risk_level=record.risk_level,
                reasoning=record.reasoning,
                risk_factors=list(record.risk_factors),
                confidence=record.confidence,
            ),
        )


class TransactionListResponse(BaseModel):
    """Response for GET /v1/transactions"""

    transactions: List[TransactionRecord]


class LiveTransactionSchema(BaseModel):
    """Transaction as shown on the live feed"""

    transaction_id: str
    amount: Decimal
    merchant_name: str
    merchant_category: str
    location: str
    card_number: str
    timestamp: datetime
    risk_level: str
    status: str
    analysis: AssessmentSchema

    @classmethod
    def from_domain(cls, monitored: MonitoredTransaction) -> "LiveTransactionSchema":
        txn = monitored.transaction
        return cls(
            transaction_id=txn.transaction_id,
            amount=cents_to_decimal(txn.amount_cents),
            merchant_name=txn.merchant_name,
            merchant_category=txn.merchant_category,
            location=txn.location,
            card_number=txn.card_number,
            timestamp=txn.timestamp,
            risk_level=monitored.risk_level,
            status=monitored.status,
            analysis=AssessmentSchema.from_domain(monitored.assessment),
        )


class LiveAlertSchema(BaseModel):
    """Alert raised by the live feed"""

    alert_id: str
    alert_type: str
    severity: str
    title: str
    message: str
    created_at: datetime
    transaction_id: Optional[str] = None
    amount: Optional[Decimal] = None
    location: Optional[str] = None
    confidence: float

    @classmethod
    def from_domain(cls, alert: LiveAlert) -> "LiveAlertSchema":
        return cls(
            alert_id=alert.alert_id,
            alert_type=alert.alert_type,
            severity=alert.severity,
            title=alert.title,
            message=alert.message,
            created_at=alert.created_at,
            transaction_id=alert.transaction_id,
            amount=cents_to_decimal(alert.amount_cents),
            location=alert.location,
            confidence=alert.confidence,
        )


class LiveStatsSchema(BaseModel):
    """Rolling live feed statistics"""

    total_transactions: int
    fraud_detected: int
    total_amount: Decimal
    average_amount: Decimal
    risk_index: float
    accuracy: float
    transactions_per_second: int
    blocked_transactions: int
    flagged_transactions: int
    approved_transactions: int

    @classmethod
    def from_domain(cls, stats: LiveStats) -> "LiveStatsSchema":
        return cls(
            total_transactions=stats.total_transactions,
            fraud_detected=stats.fraud_detected,
            total_amount=cents_to_decimal(stats.total_amount_cents),
            average_amount=cents_to_decimal(stats.average_amount_cents),
            risk_index=stats.risk_index,
            accuracy=stats.accuracy,
            transactions_per_second=stats.transactions_per_second,
            blocked_transactions=stats.blocked_transactions,
            flagged_transactions=stats.flagged_transactions,
            approved_transactions=stats.approved_transactions,
        )


class LiveSnapshotResponse(BaseModel):
    """Response for GET /v1/live/snapshot"""

    running: bool
    transactions: List[LiveTransactionSchema]
    alerts: List[LiveAlertSchema]
    stats: LiveStatsSchema


class ActionResponse(BaseModel):
    """Response for live feed quick actions"""

    success: bool
    transaction_id: Optional[str] = None
    alert_id: Optional[str] = None
