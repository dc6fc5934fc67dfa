__all__ = [
    "ExecutionResult",
    "Failed",
    "FailureKind",
    "OrderExecutor",
    "PreparedOrder",
    "Submitted",
]

from fng_trader.engine.executor import (
    ExecutionResult,
    Failed,
    FailureKind,
    OrderExecutor,
    PreparedOrder,
    Submitted,
)
