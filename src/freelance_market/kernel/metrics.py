"""
Prometheus metrics for the marketplace.

Provides observability into service operations and the bid/project lifecycle.
"""

import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram

from freelance_market.kernel.errors import MarketplaceError

# ============================================================================
# Service Operation Metrics
# ============================================================================

operations_processed_total = Counter(
    "market_operations_processed_total",
    "Total number of service operations processed",
    ["operation", "status"],  # status: success, rejected, failure
)

operation_duration_seconds = Histogram(
    "market_operation_duration_seconds",
    "Duration of service operations in seconds",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

# ============================================================================
# Bid Lifecycle Metrics
# ============================================================================

bids_submitted_total = Counter(
    "market_bids_submitted_total",
    "Total number of bids submitted",
)

bid_decisions_total = Counter(
    "market_bid_decisions_total",
    "Total number of client decisions on bids",
    ["decision"],  # accepted, rejected, auto_rejected
)

bid_rankings_total = Counter(
    "market_bid_rankings_total",
    "Total number of ranked bid listings served",
    ["strategy"],
)

# ============================================================================
# Project Lifecycle Metrics
# ============================================================================

project_transitions_total = Counter(
    "market_project_transitions_total",
    "Total number of applied project status transitions",
    ["from_status", "to_status"],
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_operation(
    operation: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator tracking duration and outcome of an async service operation.

    Domain errors count as "rejected", anything else as "failure".

    Args:
        operation: Operation name used as the metric label
    """
    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            status = "success"
            try:
                return await func(*args, **kwargs)
            except MarketplaceError:
                status = "rejected"
                raise
            except Exception:
                status = "failure"
                raise
            finally:
                operation_duration_seconds.labels(operation=operation).observe(
                    time.perf_counter() - start
                )
                operations_processed_total.labels(
                    operation=operation, status=status
                ).inc()

        return wrapper

    return decorator

