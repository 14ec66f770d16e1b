"""Mock transaction generation for the live feed and demos"""

import random
from datetime import datetime
from typing import Optional

from fraudwatch.domain.models import Transaction

MERCHANTS = (
    "Amazon", "Walmart", "Target", "Starbucks", "McDonald's", "Shell", "Exxon",
    "Home Depot", "Best Buy", "CVS Pharmacy", "Walgreens", "Costco", "Apple Store",
    "Google Play", "Netflix", "Spotify", "Uber", "Lyft", "DoorDash", "Grubhub",
)

SUSPICIOUS_MERCHANTS = ("TempMerchant", "TestStore", "UnknownVendor", "CashAdvance")

CATEGORIES = (
    "Grocery", "Gas Station", "Restaurant", "Retail", "Entertainment", "Transportation",
    "Healthcare", "Utilities", "Online Services", "Travel", "Hotels", "Airlines",
)

LOCATIONS = (
    "New York, NY", "Los Angeles, CA", "Chicago, IL", "Houston, TX", "Phoenix, AZ",
    "Philadelphia, PA", "San Antonio, TX", "San Diego, CA", "Dallas, TX", "San Jose, CA",
    "Austin, TX", "Jacksonville, FL", "Fort Worth, TX", "Columbus, OH", "Charlotte, NC",
)

SUSPICIOUS_LOCATIONS = (
    "Lagos, Nigeria", "Moscow, Russia", "Beijing, China", "Mumbai, India", "São Paulo, Brazil",
)

SUSPICIOUS_RATE = 0.15


def _generate_amount_cents(rng: random.Random, suspicious: bool) -> int:
    """
    Draw a transaction amount.

    Suspicious draws split into card-testing micro amounts (30%),
    high-value amounts (40%) and round hundreds (30%).
    """
    if not suspicious:
        amount = rng.random() * 300 + 5
    else:
        kind = rng.random()
        if kind < 0.3:
            amount = rng.random() * 0.99 + 0.01
        elif kind < 0.7:
            amount = rng.random() * 8000 + 2000
        else:
            amount = (rng.randrange(20) + 1) * 100

    return max(1, round(amount * 100))


def generate_mock_transaction(
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> Transaction:
    """
    Generate one plausible card transaction.

    Args:
        rng: Random source (default: fresh unseeded random.Random); pass a seeded
            random.Random for reproducible output
        now: Reference time for the timestamp (default: datetime.now())

    Returns:
        Transaction with roughly 15% carrying suspicious traits
    """
    rng = rng or random.Random()
    now = now or datetime.now()

    suspicious = rng.random() < SUSPICIOUS_RATE
    amount_cents = _generate_amount_cents(rng, suspicious)

    if suspicious and rng.random() < 0.6:
        location = rng.choice(SUSPICIOUS_LOCATIONS)
    else:
        location = rng.choice(LOCATIONS)

    merchant_name = rng.choice(MERCHANTS)
    if suspicious and rng.random() < 0.3:
        merchant_name = rng.choice(SUSPICIOUS_MERCHANTS)

    merchant_category = rng.choice(CATEGORIES)
    card_number = f"****-****-****-{rng.randrange(1000, 10000)}"

    timestamp = now
    if suspicious and rng.random() < 0.4:
        # 2-5 AM on the same day
        timestamp = now.replace(hour=rng.randrange(2, 6), minute=rng.randrange(60), second=0, microsecond=0)

    epoch_ms = int(now.timestamp() * 1000)

    return Transaction(
        transaction_id=f"TXN-{epoch_ms}-{rng.randrange(1000)}",
        amount_cents=amount_cents,
        merchant_name=merchant_name,
        merchant_category=merchant_category,
        location=location,
        card_number=card_number,
        timestamp=timestamp,
    )
