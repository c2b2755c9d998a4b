"""Telemetry module for logging, metrics, and opportunity reporting."""

from oraclearb.telemetry.logger import AsyncLogger, build_handlers, setup_logging
from oraclearb.telemetry.metrics import MetricsCollector
from oraclearb.telemetry.reporter import OpportunityReporter


__all__ = [
    "AsyncLogger",
    "MetricsCollector",
    "OpportunityReporter",
    "build_handlers",
    "setup_logging",
]
