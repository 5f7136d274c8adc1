"""Cache-aside core for cachegate.

The engine decides between cache hit, resolution and population, and
handles explicit invalidation. Store and resolver are injected.
"""

from cachegate.core.engine import (
    AUTO_RESOLVE,
    AutoResolve,
    CacheAsideEngine,
    CallerSupplied,
    FetchResult,
    InvalidateResult,
    PayloadMode,
    Source,
)
from cachegate.core.errors import (
    CacheGatewayError,
    CachePopulationFailed,
    ErrorKind,
    InvalidRequest,
    StoreUnavailable,
    UpstreamFailure,
)

__all__ = [
    # Engine
    "AUTO_RESOLVE",
    "AutoResolve",
    "CacheAsideEngine",
    "CallerSupplied",
    "FetchResult",
    "InvalidateResult",
    "PayloadMode",
    "Source",
    # Errors
    "CacheGatewayError",
    "CachePopulationFailed",
    "ErrorKind",
    "InvalidRequest",
    "StoreUnavailable",
    "UpstreamFailure",
]
