"""Single-rule validation engine.

Evaluates one {rule, data} request and returns a typed outcome.
It performs no I/O and never raises for JSON-decoded input.
"""

from .engine import evaluate, parse_request, resolve_field
from .conditions import CONDITIONS
from .outcomes import Completed, EarlyAbort
from .error_taxonomy import AbortTaxonomy

__all__ = ['evaluate', 'parse_request', 'resolve_field', 'CONDITIONS', 'Completed', 'EarlyAbort', 'AbortTaxonomy']
__version__ = '1.0.0'
