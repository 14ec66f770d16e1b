"""POST /v1/analyze-transaction - fraud assessment endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from fraudwatch.api.v1.schemas import TransactionRequest, AnalyzeResponse, AssessmentSchema
from fraudwatch.api.dependencies import get_request_id, get_velocity_signal
from fraudwatch.infrastructure.database.session import get_db
from fraudwatch.infrastructure.database.repositories import TransactionRepository
from fraudwatch.domain.scoring import assess
from fraudwatch.domain.exceptions import InvalidTransactionDataError
from fraudwatch.infrastructure.observability.metrics import record_assessment
from fraudwatch.infrastructure.observability.logging import log_assessment

router = APIRouter()

INVALID_TRANSACTION = {"error": "Invalid transaction data"}
ANALYSIS_FAILED = {"error": "Failed to analyze transaction"}


@router.post("/analyze-transaction", response_model=AnalyzeResponse)
def analyze_transaction(
    request_body: TransactionRequest,
    request: Request,
    db: Session = Depends(get_db),
    velocity_signal: float = Depends(get_velocity_signal),
):
    """
    Assess a transaction for fraud risk.

    Flow:
    1. Convert request to a domain transaction (amount -> cents)
    2. Run the rule battery and map to a risk tier
    3. Persist transaction + assessment
    4. Return assessment
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        # 1-2. Score
        transaction = request_body.to_domain()
        assessment = assess(transaction, velocity_signal)

        # 3. Persist
        TransactionRepository(db).save(transaction, assessment)
        db.commit()

        # Record metrics and logs
        duration_ms = (time.time() - start_time) * 1000
        record_assessment(assessment)
        log_assessment(request_id, transaction.transaction_id, assessment, duration_ms)

        return AnalyzeResponse(success=True, analysis=AssessmentSchema.from_domain(assessment))

    except InvalidTransactionDataError as e:
        db.rollback()
        logging.warning(f"Invalid transaction: {e}", extra={"request_id": request_id})
        return JSONResponse(status_code=400, content=INVALID_TRANSACTION)

    except Exception as e:
        db.rollback()
        logging.error(f"Transaction analysis error: {e}", extra={"request_id": request_id})
        return JSONResponse(status_code=500, content=ANALYSIS_FAILED)
