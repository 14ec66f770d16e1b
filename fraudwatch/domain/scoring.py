"""Risk scoring engine - core business logic for fraud assessments"""

import re
from datetime import datetime
from typing import Iterable, List, Sequence, Tuple

from fraudwatch.domain.exceptions import InvalidTransactionDataError
from fraudwatch.domain.models import (
    HIGH,
    LOW,
    MEDIUM,
    FraudAssessment,
    RuleOutcome,
    Transaction,
)

# Amount thresholds in cents
EXTREME_AMOUNT_CENTS = 500_000  # $5000
HIGH_AMOUNT_CENTS = 200_000  # $2000
ABOVE_AVERAGE_AMOUNT_CENTS = 100_000  # $1000
MICRO_AMOUNT_CENTS = 100  # $1
ROUND_AMOUNT_CENTS = 10_000  # $100

HIGH_RISK_COUNTRIES = ("Nigeria", "Russia", "China", "Romania", "Ukraine")
MEDIUM_RISK_COUNTRIES = ("India", "Brazil", "Mexico", "Philippines", "Indonesia")

HIGH_RISK_CATEGORIES = ("Online Services", "Entertainment", "Travel")
LOW_RISK_CATEGORIES = ("Grocery", "Gas Station", "Utilities")
LOW_RISK_DISCOUNT = 10

SUSPICIOUS_MERCHANT_PATTERNS = ("temp", "test", "unknown", "cash")
REPEATED_DIGITS = re.compile(r"(\d)\1{2,}")

HIGH_VELOCITY_SIGNAL = 0.10
ELEVATED_VELOCITY_SIGNAL = 0.20

HIGH_RISK_SCORE = 60
MEDIUM_RISK_SCORE = 30
MAX_SCORE = 100

# Factor text, in evaluation order
EXTREME_AMOUNT = "Extremely high transaction amount"
HIGH_AMOUNT = "High transaction amount"
ABOVE_AVERAGE_AMOUNT = "Above-average transaction amount"
MICRO_TRANSACTION = "Micro-transaction (card testing pattern)"
ROUND_AMOUNT = "Round amount transaction"
HIGH_RISK_LOCATION = "High-risk geographic location"
MEDIUM_RISK_LOCATION = "Medium-risk geographic location"
VERY_UNUSUAL_HOUR = "Very unusual transaction time (2-5 AM)"
LATE_HOUR = "Late night/early morning transaction"
WEEKEND_LATE_NIGHT = "Weekend late-night transaction"
HIGH_RISK_CATEGORY = "High-risk merchant category"
HIGH_VELOCITY = "High transaction velocity detected"
ELEVATED_VELOCITY = "Elevated transaction frequency"
SUSPICIOUS_CARD = "Suspicious card number pattern"
SUSPICIOUS_MERCHANT = "Suspicious merchant name pattern"

LARGE_AMOUNT_FACTORS = (EXTREME_AMOUNT, HIGH_AMOUNT, ABOVE_AVERAGE_AMOUNT)
LOCATION_FACTORS = (HIGH_RISK_LOCATION, MEDIUM_RISK_LOCATION)
VELOCITY_FACTORS = (HIGH_VELOCITY, ELEVATED_VELOCITY)

FALLBACK_REASONING = "Analysis temporarily unavailable. Using fallback assessment."
FALLBACK_FACTOR = "System analysis pending"
FALLBACK_CONFIDENCE = 0.5


def validate_transaction(transaction: Transaction) -> None:
    """
    Check that required fields are present and correctly typed.

    Range checks (negative amounts, card masks) belong to the caller.

    Raises:
        InvalidTransactionDataError: On a missing or type-mismatched field
    """
    amount = getattr(transaction, "amount_cents", None)
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise InvalidTransactionDataError(f"amount_cents must be an integer, got {amount!r}")

    for name in ("transaction_id", "merchant_name", "merchant_category", "location", "card_number"):
        value = getattr(transaction, name, None)
        if not isinstance(value, str):
            raise InvalidTransactionDataError(f"{name} must be a string, got {value!r}")

    timestamp = getattr(transaction, "timestamp", None)
    if not isinstance(timestamp, datetime):
        raise InvalidTransactionDataError(f"timestamp must be a datetime, got {timestamp!r}")


def _mentions_any(text: str, needles: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(needle.lower() in lowered for needle in needles)


def evaluate_rules(transaction: Transaction, velocity_signal: float) -> RuleOutcome:
    """
    Run the fixed rule battery against a transaction.

    Requirements:
    - Rules fire in a fixed order; factor order matches firing order
    - Amount tiers, location tiers, hour tiers and velocity tiers are else-if chains
    - Low-risk category discount never drops the running score below 0 and adds no factor

    Args:
        transaction: Transaction to evaluate
        velocity_signal: Draw in [0, 1) standing in for recent-activity tracking

    Returns:
        RuleOutcome with the raw score and fired factors
    """
    score = 0
    factors: List[str] = []
    amount = transaction.amount_cents

    # Amount
    if amount > EXTREME_AMOUNT_CENTS:
        factors.append(EXTREME_AMOUNT)
        score += 35
    elif amount > HIGH_AMOUNT_CENTS:
        factors.append(HIGH_AMOUNT)
        score += 25
    elif amount > ABOVE_AVERAGE_AMOUNT_CENTS:
        factors.append(ABOVE_AVERAGE_AMOUNT)
        score += 15

    if amount < MICRO_AMOUNT_CENTS:
        factors.append(MICRO_TRANSACTION)
        score += 30

    if amount >= ROUND_AMOUNT_CENTS and amount % ROUND_AMOUNT_CENTS == 0:
        factors.append(ROUND_AMOUNT)
        score += 10

    # Geography
    if _mentions_any(transaction.location, HIGH_RISK_COUNTRIES):
        factors.append(HIGH_RISK_LOCATION)
        score += 40
    elif _mentions_any(transaction.location, MEDIUM_RISK_COUNTRIES):
        factors.append(MEDIUM_RISK_LOCATION)
        score += 20

    # Time of day, read off the timestamp's own wall clock
    hour = transaction.timestamp.hour
    is_weekend = transaction.timestamp.weekday() in (5, 6)

    if 2 <= hour <= 5:
        factors.append(VERY_UNUSUAL_HOUR)
        score += 25
    elif hour >= 23 or hour <= 6:
        factors.append(LATE_HOUR)
        score += 15

    if is_weekend and hour >= 23:
        factors.append(WEEKEND_LATE_NIGHT)
        score += 10

    # Merchant category
    if transaction.merchant_category in HIGH_RISK_CATEGORIES:
        factors.append(HIGH_RISK_CATEGORY)
        score += 15
    elif transaction.merchant_category in LOW_RISK_CATEGORIES:
        score = max(0, score - LOW_RISK_DISCOUNT)

    # Velocity
    if velocity_signal < HIGH_VELOCITY_SIGNAL:
        factors.append(HIGH_VELOCITY)
        score += 30
    elif velocity_signal < ELEVATED_VELOCITY_SIGNAL:
        factors.append(ELEVATED_VELOCITY)
        score += 15

    # Card number
    if REPEATED_DIGITS.search(transaction.card_number[-4:]):
        factors.append(SUSPICIOUS_CARD)
        score += 20

    # Merchant name
    if _mentions_any(transaction.merchant_name, SUSPICIOUS_MERCHANT_PATTERNS):
        factors.append(SUSPICIOUS_MERCHANT)
        score += 25

    return RuleOutcome(score=score, risk_factors=tuple(factors))


def determine_risk_level(score: int) -> str:
    """
    Map raw score to a risk tier.

    Score bands:
    - 60+:     high
    - 30 - 59: medium
    - 0 - 29:  low
    """
    if score >= HIGH_RISK_SCORE:
        return HIGH
    elif score >= MEDIUM_RISK_SCORE:
        return MEDIUM
    else:
        return LOW


def build_reasoning(risk_level: str, risk_factors: Sequence[str]) -> str:
    """Human-readable summary of the tier and the top three factors"""
    count = len(risk_factors)
    if risk_level == HIGH:
        reasoning = f"High fraud risk detected with {count} critical risk factors. Immediate review recommended."
    elif risk_level == MEDIUM:
        reasoning = f"Moderate fraud risk identified with {count} risk factors. Manual review suggested."
    else:
        reasoning = "Low fraud risk assessment. Transaction appears legitimate with minimal risk indicators."

    if risk_factors:
        reasoning += f" Primary concerns: {', '.join(risk_factors[:3])}."

    return reasoning


def calculate_confidence(score: int) -> float:
    """Confidence grows with the score: score/100 + 0.3, clamped to [0.6, 0.95]"""
    confidence = min(0.95, max(0.6, score / MAX_SCORE + 0.3))
    return round(confidence, 2)


def assess(transaction: Transaction, velocity_signal: float) -> FraudAssessment:
    """
    Main entry point: score a transaction and produce a fraud assessment.

    Pure and synchronous. The velocity signal must come from the caller so
    that identical inputs always give identical assessments.

    Raises:
        InvalidTransactionDataError: If a required field is missing or mistyped
    """
    validate_transaction(transaction)
    outcome = evaluate_rules(transaction, velocity_signal)
    risk_level = determine_risk_level(outcome.score)

    return FraudAssessment(
        risk_level=risk_level,
        reasoning=build_reasoning(risk_level, outcome.risk_factors),
        risk_factors=outcome.risk_factors,
        confidence=calculate_confidence(outcome.score),
    )


def assess_many(
    transactions: Sequence[Transaction],
    velocity_signals: Sequence[float],
) -> List[FraudAssessment]:
    """Score a batch; results are aligned with the inputs"""
    if len(transactions) != len(velocity_signals):
        raise ValueError("transactions and velocity_signals must have the same length")
    return [assess(txn, signal) for txn, signal in zip(transactions, velocity_signals)]


def fallback_assessment() -> FraudAssessment:
    """Assessment returned when the scoring service cannot be reached"""
    return FraudAssessment(
        risk_level=MEDIUM,
        reasoning=FALLBACK_REASONING,
        risk_factors=(FALLBACK_FACTOR,),
        confidence=FALLBACK_CONFIDENCE,
    )


def primary_factor_group(risk_factors: Sequence[str]) -> Tuple[bool, bool, bool]:
    """Which factor families fired: (location, large amount, velocity)"""
    return (
        any(f in LOCATION_FACTORS for f in risk_factors),
        any(f in LARGE_AMOUNT_FACTORS for f in risk_factors),
        any(f in VELOCITY_FACTORS for f in risk_factors),
    )
