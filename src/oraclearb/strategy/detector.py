"""
Oracle/exchange arbitrage detection.

Compares the exchange top of book against the oracle's 95% confidence
interval and reports fee-adjusted opportunities, suppressing repeats of
the last reported one.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from oraclearb.config.constants import CONFIDENCE_95_MULTIPLIER
from oraclearb.core.types import (
    ArbitrageDirection,
    ArbitrageOpportunity,
    OracleReading,
    PriceSnapshot,
)
from oraclearb.utils.math import round_profit


logger = logging.getLogger(__name__)


@dataclass
class DetectorStats:
    """Counters for detection passes."""

    evaluations: int = 0
    incomplete_snapshots: int = 0
    unprofitable: int = 0
    duplicates_suppressed: int = 0
    opportunities_emitted: int = 0


class ArbitrageDetector:
    """
    Detects arbitrage between the exchange book and the oracle price.

    The fair-value interval is ``price ± 2.12 * confidence``, the 95%
    bound of Pyth's Laplace confidence model. A bid above the upper
    bound is a sell opportunity; an ask below the lower bound is a buy
    opportunity. The sell side is checked first.
    """

    def __init__(self, confidence_multiplier: Decimal = CONFIDENCE_95_MULTIPLIER) -> None:
        """
        Initialize detector.

        Args:
            confidence_multiplier: Width of the fair-value interval in
                units of oracle confidence.
        """
        self._confidence_multiplier = confidence_multiplier
        self._last_emitted: ArbitrageOpportunity | None = None
        self._stats = DetectorStats()

    @property
    def last_emitted(self) -> ArbitrageOpportunity | None:
        """Most recently reported opportunity."""
        return self._last_emitted

    @property
    def stats(self) -> DetectorStats:
        return self._stats

    def fair_value_bounds(self, oracle: OracleReading) -> tuple[Decimal, Decimal]:
        """
        Compute the 95% fair-value interval.

        Args:
            oracle: Scaled oracle reading.

        Returns:
            (low, high) bounds.
        """
        half_width = oracle.confidence * self._confidence_multiplier
        return oracle.price - half_width, oracle.price + half_width

    def detect(
        self,
        snapshot: PriceSnapshot,
        exchange_fee: Decimal,
    ) -> ArbitrageOpportunity | None:
        """
        Evaluate one snapshot.

        Args:
            snapshot: Current oracle reading and ticker.
            exchange_fee: Taker fee as a fraction of notional.

        Returns:
            A new opportunity, or None when data is missing, no bound is
            crossed, fees erase the profit, or the result repeats the last
            reported opportunity.
        """
        self._stats.evaluations += 1

        oracle, ticker = snapshot
        if oracle is None or ticker is None:
            self._stats.incomplete_snapshots += 1
            return None

        low, high = self.fair_value_bounds(oracle)

        if ticker.best_bid > high:
            return self._evaluate(
                exchange_price=ticker.best_bid,
                reference_price=high,
                quantity=ticker.best_bid_qty,
                exchange_fee=exchange_fee,
                direction=ArbitrageDirection.SELL_EXCHANGE_BUY_ORACLE_SIDE,
            )

        if ticker.best_ask < low:
            return self._evaluate(
                exchange_price=ticker.best_ask,
                reference_price=low,
                quantity=ticker.best_ask_qty,
                exchange_fee=exchange_fee,
                direction=ArbitrageDirection.BUY_EXCHANGE_SELL_ORACLE_SIDE,
            )

        return None

    def _evaluate(
        self,
        exchange_price: Decimal,
        reference_price: Decimal,
        quantity: Decimal,
        exchange_fee: Decimal,
        direction: ArbitrageDirection,
    ) -> ArbitrageOpportunity | None:
        """Apply fees and duplicate suppression to a crossed bound."""
        gross_delta = abs(exchange_price - reference_price) * quantity
        fee_cost = quantity * exchange_price * exchange_fee
        estimated_profit = round_profit(gross_delta - fee_cost)

        if estimated_profit <= 0:
            self._stats.unprofitable += 1
            return None

        opportunity = ArbitrageOpportunity(
            direction=direction,
            quantity=quantity,
            estimated_profit=estimated_profit,
            exchange_price=exchange_price,
            oracle_price=reference_price,
        )

        if opportunity == self._last_emitted:
            self._stats.duplicates_suppressed += 1
            return None

        self._last_emitted = opportunity
        self._stats.opportunities_emitted += 1
        logger.debug(f"New opportunity: {opportunity}")
        return opportunity

    def reset(self) -> None:
        """Forget the last reported opportunity."""
        self._last_emitted = None
