"""/v1/live - live transaction feed snapshot and quick actions"""

from fastapi import APIRouter, Depends, HTTPException

from fraudwatch.api.v1.schemas import (
    ActionResponse,
    LiveAlertSchema,
    LiveSnapshotResponse,
    LiveStatsSchema,
    LiveTransactionSchema,
)
from fraudwatch.api.dependencies import get_live_engine
from fraudwatch.infrastructure.feed.live_engine import LiveTransactionEngine

router = APIRouter()


@router.get("/live/snapshot", response_model=LiveSnapshotResponse)
def get_snapshot(engine: LiveTransactionEngine = Depends(get_live_engine)):
    """Recent transactions, alerts and rolling stats"""
    snapshot = engine.snapshot()
    return LiveSnapshotResponse(
        running=engine.is_running,
        transactions=[LiveTransactionSchema.from_domain(t) for t in snapshot.transactions],
        alerts=[LiveAlertSchema.from_domain(a) for a in snapshot.alerts],
        stats=LiveStatsSchema.from_domain(snapshot.stats),
    )


@router.post("/live/transactions/{transaction_id}/{action}", response_model=ActionResponse)
def apply_action(
    transaction_id: str,
    action: str,
    engine: LiveTransactionEngine = Depends(get_live_engine),
):
    """Block, approve or flag a transaction on the feed"""
    handlers = {
        "block": engine.block_transaction,
        "approve": engine.approve_transaction,
        "flag": engine.flag_transaction,
    }
    handler = handlers.get(action)
    if handler is None:
        raise HTTPException(status_code=400, detail=f"Unknown action: {action}")

    if not handler(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found on live feed")

    return ActionResponse(success=True, transaction_id=transaction_id)


@router.delete("/live/alerts/{alert_id}", response_model=ActionResponse)
def dismiss_alert(alert_id: str, engine: LiveTransactionEngine = Depends(get_live_engine)):
    """Dismiss an alert"""
    if not engine.dismiss_alert(alert_id):
        raise HTTPException(status_code=404, detail="Alert not found")
    return ActionResponse(success=True, alert_id=alert_id)
