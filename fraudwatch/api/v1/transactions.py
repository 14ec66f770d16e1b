"""GET /v1/transactions - stored transaction lookups"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from fraudwatch.api.v1.schemas import TransactionListResponse, TransactionRecord
from fraudwatch.config import settings
from fraudwatch.infrastructure.database.session import get_db
from fraudwatch.infrastructure.database.repositories import TransactionRepository

router = APIRouter()


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    limit: int = Query(settings.history_limit, ge=1, le=500, description="Maximum records to return"),
    db: Session = Depends(get_db),
):
    """Most recently assessed transactions first"""
    records = TransactionRepository(db).list_recent(limit=limit)
    return TransactionListResponse(transactions=[TransactionRecord.from_record(r) for r in records])


@router.get("/transactions/{transaction_id}", response_model=TransactionRecord)
def get_transaction(transaction_id: str, db: Session = Depends(get_db)):
    """Retrieve a stored transaction and its assessment"""
    record = TransactionRepository(db).get(transaction_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionRecord.from_record(record)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    """Remove a stored transaction"""
    if not TransactionRepository(db).delete(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    db.commit()
