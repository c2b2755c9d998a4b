"""Oracle module for Pyth price readings."""

from oraclearb.oracle.client import OracleClient
from oraclearb.oracle.hermes import HermesPriceSource, parse_latest_price


__all__ = [
    "HermesPriceSource",
    "OracleClient",
    "parse_latest_price",
]
