"""Data access layer for assessed transactions"""

from typing import List, Optional
from sqlalchemy.orm import Session
from fraudwatch.infrastructure.database.models import AssessedTransaction
from fraudwatch.domain.models import FraudAssessment, Transaction


class TransactionRepository:
    """CRUD repository for assessed transactions, keyed by transaction id"""

    def __init__(self, db: Session):
        self.db = db

    def save(self, transaction: Transaction, assessment: FraudAssessment) -> AssessedTransaction:
        """Insert or overwrite the record for a transaction"""
        record = self.get(transaction.transaction_id)
        if record is None:
            record = AssessedTransaction(transaction_id=transaction.transaction_id)
            self.db.add(record)

        record.amount_cents = transaction.amount_cents
        record.merchant_name = transaction.merchant_name
        record.merchant_category = transaction.merchant_category
        record.location = transaction.location
        record.card_number = transaction.card_number
        record.occurred_at = transaction.timestamp
        record.risk_level = assessment.risk_level
        record.reasoning = assessment.reasoning
        record.risk_factors = list(assessment.risk_factors)
        record.confidence = assessment.confidence
        record.status = record.status or "pending"

        self.db.flush()
        return record

    def get(self, transaction_id: str) -> Optional[AssessedTransaction]:
        """Fetch a single record"""
        return self.db.get(AssessedTransaction, transaction_id)

    def list_recent(self, limit: int = 50) -> List[AssessedTransaction]:
        """Most recently assessed transactions first"""
        return (
            self.db.query(AssessedTransaction)
            .order_by(AssessedTransaction.created_at.desc(), AssessedTransaction.occurred_at.desc())
            .limit(limit)
            .all()
        )

    def delete(self, transaction_id: str) -> bool:
        """Remove a record; returns False if it did not exist"""
        record = self.get(transaction_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True
