"""
Oracle/Exchange Spread Monitor.

An asynchronous monitor that compares the Binance top of book against
the Pyth oracle price for the same pair and reports fee-adjusted
arbitrage opportunities outside the oracle's confidence interval.
"""

__version__ = "1.0.0"
__author__ = "Tim"
