"""Protocol constants and service configuration.

No I/O at import time. Parameters that live on-chain (fees, limits,
variance fee coefficients) travel with the market snapshot, not here.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import final

# ---------------------------------------------------------------------------
# Protocol constants
# ---------------------------------------------------------------------------

DEFAULT_ITERATIONS: int = 1
SECONDS_PER_YEAR: int = 365 * 24 * 60 * 60
SECONDS_PER_DAY: int = 24 * 60 * 60
ZERO_ADDRESS: str = "0x0000000000000000000000000000000000000000"

# Passed to the disablement policy by the quote engine.
QUOTE_MIN_LIQUIDITY: int = 0


# ---------------------------------------------------------------------------
# Temporal worker configuration
# ---------------------------------------------------------------------------

ENV_TEMPORAL_HOST = "AMMQUOTE_TEMPORAL_HOST"
ENV_TEMPORAL_NAMESPACE = "AMMQUOTE_TEMPORAL_NAMESPACE"
ENV_TASK_QUEUE = "AMMQUOTE_TASK_QUEUE"


@final
@dataclass(frozen=True, slots=True)
class WorkerConfig:
    """Where the quote worker connects and which task queue it serves."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = "ammquote"

    def __post_init__(self) -> None:
        if not self.target_host:
            raise TypeError("WorkerConfig.target_host must be non-empty")
        if not self.task_queue:
            raise TypeError("WorkerConfig.task_queue must be non-empty")

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> WorkerConfig:
        """Defaults overridden by AMMQUOTE_* environment variables when set."""
        env = os.environ if environ is None else environ
        defaults = WorkerConfig()
        return WorkerConfig(
            target_host=env.get(ENV_TEMPORAL_HOST) or defaults.target_host,
            namespace=env.get(ENV_TEMPORAL_NAMESPACE) or defaults.namespace,
            task_queue=env.get(ENV_TASK_QUEUE) or defaults.task_queue,
        )


@final
@dataclass(frozen=True, slots=True)
class ActivityTimeouts:
    """Start-to-close timeouts. Both activities are pure CPU work over supplied data."""

    price_quote: timedelta = timedelta(seconds=30)
    reconstruct_trade: timedelta = timedelta(seconds=30)
