"""ammquote.infra -- protocol constants and service configuration."""

from ammquote.infra.config import DEFAULT_ITERATIONS as DEFAULT_ITERATIONS
from ammquote.infra.config import QUOTE_MIN_LIQUIDITY as QUOTE_MIN_LIQUIDITY
from ammquote.infra.config import SECONDS_PER_DAY as SECONDS_PER_DAY
from ammquote.infra.config import SECONDS_PER_YEAR as SECONDS_PER_YEAR
from ammquote.infra.config import ZERO_ADDRESS as ZERO_ADDRESS
from ammquote.infra.config import ActivityTimeouts as ActivityTimeouts
from ammquote.infra.config import WorkerConfig as WorkerConfig
