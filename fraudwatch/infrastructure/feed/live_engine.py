"""Live transaction feed: generates, scores and broadcasts transactions on an interval"""

import asyncio
import logging
import random
import string
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from fraudwatch.domain.generator import generate_mock_transaction
from fraudwatch.domain.models import (
    HIGH,
    LOW,
    MEDIUM,
    FeedSnapshot,
    LiveAlert,
    LiveStats,
    MonitoredTransaction,
    Transaction,
)
from fraudwatch.domain.scoring import EXTREME_AMOUNT_CENTS, HIGH_RISK_LOCATION, assess, primary_factor_group
from fraudwatch.infrastructure.observability.metrics import (
    alert_counter,
    feed_transaction_counter,
    record_assessment,
)
from fraudwatch.utils.money import format_cents

Subscriber = Callable[[FeedSnapshot], None]

# Weight of each tier in the rolling risk index
RISK_INDEX_WEIGHTS = {HIGH: 9, MEDIUM: 5, LOW: 1}
RISK_INDEX_WINDOW = 50
MEDIUM_ALERT_DRAW = 0.7

SNAPSHOT_TRANSACTIONS = 20
SNAPSHOT_ALERTS = 10


class LiveTransactionEngine:
    """
    Event source for the monitoring dashboard.

    Owned by the application, never a module-level singleton. Transactions
    are scored with the same pure assess() used by the API; the velocity
    signal for each one is drawn from the engine's own random source.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        generator: Callable[..., Transaction] = generate_mock_transaction,
        initial_size: int = 100,
        max_transactions: int = 1000,
        max_alerts: int = 100,
        min_interval: float = 0.5,
        max_interval: float = 3.0,
    ):
        self.rng = rng or random.Random()
        self.generator = generator
        self.max_transactions = max_transactions
        self.max_alerts = max_alerts
        self.min_interval = min_interval
        self.max_interval = max_interval

        self._transactions: List[MonitoredTransaction] = []
        self._alerts: List[LiveAlert] = []
        self._stats = LiveStats()
        self._subscribers: List[Subscriber] = []
        self._tasks: List[asyncio.Task] = []
        self._running = False
        self._transaction_count = 0
        self._last_second_count = 0

        # Seed the buffer without raising alerts
        for _ in range(initial_size):
            self._transactions.insert(0, self._score(self.generator(self.rng)))
        del self._transactions[self.max_transactions:]
        self._update_stats()

    @property
    def is_running(self) -> bool:
        return self._running

    # Ingestion

    def _score(self, transaction: Transaction, velocity_signal: Optional[float] = None) -> MonitoredTransaction:
        signal = self.rng.random() if velocity_signal is None else velocity_signal
        assessment = assess(transaction, signal)
        return MonitoredTransaction(
            transaction=transaction,
            assessment=assessment,
            risk_level=assessment.risk_level,
        )

    def ingest(self, transaction: Transaction, velocity_signal: Optional[float] = None) -> MonitoredTransaction:
        """
        Score a transaction and push it to the front of the feed.

        High-risk transactions always raise an alert; medium-risk ones raise
        one on roughly 30% of draws.
        """
        monitored = self._score(transaction, velocity_signal)
        record_assessment(monitored.assessment)
        feed_transaction_counter.inc()

        self._transactions.insert(0, monitored)
        del self._transactions[self.max_transactions:]
        self._transaction_count += 1

        if monitored.risk_level == HIGH or (
            monitored.risk_level == MEDIUM and self.rng.random() > MEDIUM_ALERT_DRAW
        ):
            self._raise_alert(monitored)

        self._update_stats()
        self._notify()
        return monitored

    def tick(self) -> MonitoredTransaction:
        """Generate and ingest one mock transaction"""
        return self.ingest(self.generator(self.rng))

    # Lifecycle

    async def start(self) -> None:
        """Start generating transactions; no-op if already running"""
        if self._running:
            return

        self._running = True
        self._tasks = [
            asyncio.create_task(self._generate_loop()),
            asyncio.create_task(self._throughput_loop()),
        ]
        logging.info("Live feed started", extra={"step": "feed_start"})

    async def stop(self) -> None:
        """Stop the feed and wait for its tasks to wind down"""
        self._running = False
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logging.info("Live feed stopped", extra={"step": "feed_stop"})

    async def _generate_loop(self) -> None:
        while self._running:
            self.tick()
            await asyncio.sleep(self.rng.uniform(self.min_interval, self.max_interval))

    async def _throughput_loop(self) -> None:
        while self._running:
            await asyncio.sleep(1.0)
            self._stats.transactions_per_second = self._transaction_count - self._last_second_count
            self._last_second_count = self._transaction_count
            self._notify()

    # Alerts

    def _raise_alert(self, monitored: MonitoredTransaction) -> LiveAlert:
        txn = monitored.transaction
        location_risk, large_amount, velocity = primary_factor_group(monitored.assessment.risk_factors)

        if location_risk:
            alert_type, severity, title = "geographic", "high", "Geographic Risk Alert"
            tier = "high" if HIGH_RISK_LOCATION in monitored.assessment.risk_factors else "medium"
            message = f"Transaction from {tier}-risk location: {txn.location}"
        elif large_amount:
            alert_type, title = "amount", "High-Value Transaction"
            severity = "critical" if txn.amount_cents > EXTREME_AMOUNT_CENTS else "high"
            message = f"Large transaction amount: {format_cents(txn.amount_cents)}"
        elif velocity:
            alert_type, severity, title = "velocity", "medium", "Velocity Check Alert"
            message = "Multiple transactions detected in rapid succession"
        elif monitored.risk_level == HIGH:
            alert_type, severity, title = "fraud", "critical", "High-Risk Fraud Detected"
            message = f"Suspicious transaction of {format_cents(txn.amount_cents)} at {txn.merchant_name}"
        else:
            alert_type, severity, title = "anomaly", "high", "Transaction Anomaly"
            message = f"Unusual spending pattern detected for card {txn.card_number}"

        now = datetime.now()
        suffix = "".join(self.rng.choice(string.ascii_lowercase + string.digits) for _ in range(9))
        alert = LiveAlert(
            alert_id=f"ALT-{int(now.timestamp() * 1000)}-{suffix}",
            alert_type=alert_type,
            severity=severity,
            title=title,
            message=message,
            created_at=now,
            transaction_id=txn.transaction_id,
            amount_cents=txn.amount_cents,
            location=txn.location,
            confidence=monitored.assessment.confidence,
        )

        self._alerts.insert(0, alert)
        del self._alerts[self.max_alerts:]
        alert_counter.labels(severity=severity).inc()
        logging.warning(
            f"Live alert raised: {title}",
            extra={"alert_id": alert.alert_id, "transaction_id": txn.transaction_id, "severity": severity},
        )
        return alert

    # Stats and subscribers

    def _update_stats(self) -> None:
        total = len(self._transactions)
        fraud_count = sum(1 for t in self._transactions if t.risk_level == HIGH)
        flagged_count = sum(1 for t in self._transactions if t.risk_level == MEDIUM)
        approved_count = sum(1 for t in self._transactions if t.risk_level == LOW)
        total_amount = sum(t.transaction.amount_cents for t in self._transactions)

        recent = self._transactions[:RISK_INDEX_WINDOW]
        risk_values = [RISK_INDEX_WEIGHTS.get(t.risk_level, 3) for t in recent]
        risk_index = round(sum(risk_values) / len(risk_values), 2) if risk_values else 2.3

        self._stats.total_transactions = total
        self._stats.fraud_detected = fraud_count
        self._stats.total_amount_cents = total_amount
        self._stats.average_amount_cents = total_amount // total if total else 0
        self._stats.risk_index = risk_index
        self._stats.accuracy = round(max(95.0, 100 - (fraud_count / max(total, 1)) * 15), 2)
        self._stats.blocked_transactions = fraud_count
        self._stats.flagged_transactions = flagged_count
        self._stats.approved_transactions = approved_count

    def snapshot(self) -> FeedSnapshot:
        """Most recent transactions and alerts plus a copy of the stats"""
        return FeedSnapshot(
            transactions=self._transactions[:SNAPSHOT_TRANSACTIONS],
            alerts=self._alerts[:SNAPSHOT_ALERTS],
            stats=replace(self._stats),
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback; it receives a snapshot now and after every change.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)
        callback(self.snapshot())

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        if not self._subscribers:
            return
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                logging.error(f"Live feed subscriber failed: {e}", extra={"step": "feed_notify"})

    # Getters

    def get_transactions(self, limit: int = SNAPSHOT_TRANSACTIONS) -> List[MonitoredTransaction]:
        return self._transactions[:limit]

    def get_alerts(self, limit: int = SNAPSHOT_ALERTS) -> List[LiveAlert]:
        return self._alerts[:limit]

    def get_stats(self) -> LiveStats:
        return replace(self._stats)

    # Quick actions

    def _override(self, transaction_id: str, risk_level: str, status: str) -> bool:
        for monitored in self._transactions:
            if monitored.transaction_id == transaction_id:
                monitored.risk_level = risk_level
                monitored.status = status
                self._update_stats()
                self._notify()
                return True
        return False

    def block_transaction(self, transaction_id: str) -> bool:
        return self._override(transaction_id, HIGH, "blocked")

    def approve_transaction(self, transaction_id: str) -> bool:
        return self._override(transaction_id, LOW, "approved")

    def flag_transaction(self, transaction_id: str) -> bool:
        return self._override(transaction_id, MEDIUM, "flagged")

    def dismiss_alert(self, alert_id: str) -> bool:
        for index, alert in enumerate(self._alerts):
            if alert.alert_id == alert_id:
                del self._alerts[index]
                self._notify()
                return True
        return False
