"""Retry policy for oracle-backed entry points."""

from bargainbot.resilience.retry import retry_oracle_call

__all__ = [
    "retry_oracle_call",
]
