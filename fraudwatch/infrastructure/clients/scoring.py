"""Scoring API HTTP client for assessing transactions across a network boundary"""

import logging
from typing import Any, Dict

import httpx

from fraudwatch.config import settings
from fraudwatch.domain.exceptions import ScoringServiceError
from fraudwatch.domain.models import RISK_LEVELS, FraudAssessment, Transaction
from fraudwatch.domain.scoring import fallback_assessment
from fraudwatch.infrastructure.observability.metrics import scoring_failures_counter, scoring_latency_histogram
from fraudwatch.utils.money import cents_to_decimal


def transaction_payload(transaction: Transaction) -> Dict[str, Any]:
    """Serialize a transaction into the analyze-transaction request body"""
    return {
        "transaction_id": transaction.transaction_id,
        "amount": str(cents_to_decimal(transaction.amount_cents)),
        "merchant_name": transaction.merchant_name,
        "merchant_category": transaction.merchant_category,
        "location": transaction.location,
        "card_number": transaction.card_number,
        "timestamp": transaction.timestamp.isoformat(),
    }


class ScoringClient:
    """Client for a remote fraudwatch scoring service"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.scoring_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def analyze(self, transaction: Transaction) -> FraudAssessment:
        """
        Request an assessment for a transaction.

        Raises:
            ScoringServiceError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                with scoring_latency_histogram.time():
                    response = await client.post(
                        f"{self.base_url}/v1/analyze-transaction",
                        json=transaction_payload(transaction),
                    )
                response.raise_for_status()
                analysis = response.json()["analysis"]

                risk_level = analysis["risk_level"]
                if risk_level not in RISK_LEVELS:
                    raise ValueError(f"unknown risk level {risk_level!r}")

                return FraudAssessment(
                    risk_level=risk_level,
                    reasoning=analysis["reasoning"],
                    risk_factors=tuple(analysis["risk_factors"]),
                    confidence=float(analysis["confidence"]),
                )

            except httpx.TimeoutException as e:
                raise ScoringServiceError(f"Scoring API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ScoringServiceError(f"Scoring API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise ScoringServiceError(f"Scoring API unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise ScoringServiceError(f"Invalid assessment data from scoring API: {e}") from e

    async def analyze_or_fallback(self, transaction: Transaction) -> FraudAssessment:
        """Like analyze(), but degrades to the fallback assessment when the service is unavailable"""
        try:
            return await self.analyze(transaction)
        except ScoringServiceError as e:
            scoring_failures_counter.inc()
            logging.warning(
                f"Scoring service unavailable, using fallback: {e}",
                extra={"transaction_id": transaction.transaction_id},
            )
            return fallback_assessment()
