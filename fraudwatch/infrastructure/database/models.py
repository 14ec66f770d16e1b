"""SQLAlchemy ORM models for assessed transactions"""

from sqlalchemy import Column, String, BigInteger, Float, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class AssessedTransaction(Base):
    """Transaction together with the assessment it received"""

    __tablename__ = "assessed_transaction"

    transaction_id = Column(String(128), primary_key=True)
    amount_cents = Column(BigInteger, nullable=False)
    merchant_name = Column(Text, nullable=False)
    merchant_category = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    card_number = Column(String(32), nullable=False)
    occurred_at = Column(DateTime, nullable=False)
    risk_level = Column(String(16), nullable=False, index=True)
    reasoning = Column(Text, nullable=False)
    risk_factors = Column(JSON, nullable=False)
    confidence = Column(Float, nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
