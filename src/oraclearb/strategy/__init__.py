"""Strategy module for arbitrage detection and fee handling."""

from oraclearb.strategy.detector import ArbitrageDetector
from oraclearb.strategy.fees import resolve_taker_fee, taker_fee_for_symbol


__all__ = [
    "ArbitrageDetector",
    "resolve_taker_fee",
    "taker_fee_for_symbol",
]
