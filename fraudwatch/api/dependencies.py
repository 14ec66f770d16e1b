"""Dependency injection for FastAPI endpoints"""

import random

from fastapi import HTTPException, Request

from fraudwatch.infrastructure.feed.live_engine import LiveTransactionEngine


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_velocity_signal() -> float:
    """Draw the velocity signal for one assessment; override in tests to pin it"""
    return random.random()


def get_live_engine(request: Request) -> LiveTransactionEngine:
    """Provide the application's live feed engine"""
    engine = getattr(request.app.state, "live_engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Live feed not available")
    return engine
