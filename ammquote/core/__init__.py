"""ammquote.core -- public API for the shared value types and arithmetic."""

from ammquote.core.errors import (
    FieldViolation as FieldViolation,
)
from ammquote.core.errors import (
    InvalidArgumentError as InvalidArgumentError,
)
from ammquote.core.errors import (
    PricingError as PricingError,
)
from ammquote.core.errors import (
    QuoteError as QuoteError,
)
from ammquote.core.fixed_point import (
    UNIT as UNIT,
)
from ammquote.core.fixed_point import (
    from_fixed as from_fixed,
)
from ammquote.core.fixed_point import (
    from_units as from_units,
)
from ammquote.core.fixed_point import (
    scaled_div as scaled_div,
)
from ammquote.core.fixed_point import (
    scaled_mul as scaled_mul,
)
from ammquote.core.fixed_point import (
    to_fixed as to_fixed,
)
from ammquote.core.result import (
    Err as Err,
)
from ammquote.core.result import (
    Ok as Ok,
)
from ammquote.core.result import (
    Result as Result,
)
from ammquote.core.result import (
    sequence as sequence,
)
from ammquote.core.result import (
    unwrap as unwrap,
)
from ammquote.core.serialization import (
    canonical_bytes as canonical_bytes,
)
from ammquote.core.serialization import (
    content_hash as content_hash,
)
from ammquote.core.types import (
    FrozenMap as FrozenMap,
)
from ammquote.core.types import (
    UtcDatetime as UtcDatetime,
)
