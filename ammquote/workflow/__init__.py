"""ammquote.workflow -- Temporal.io quote and trade reconciliation service."""

from ammquote.workflow.types import (
    QuoteOutput as QuoteOutput,
)
from ammquote.workflow.types import (
    QuoteRequest as QuoteRequest,
)
from ammquote.workflow.types import (
    ReconciliationInput as ReconciliationInput,
)
from ammquote.workflow.types import (
    ReconciliationResult as ReconciliationResult,
)
from ammquote.workflow.types import (
    ReconstructionInput as ReconstructionInput,
)
from ammquote.workflow.types import (
    ReconstructionOutput as ReconstructionOutput,
)
