"""Local-computation backing source.

Wraps a plain function (sync or async) as a resolver:

    async def load_report(key: str, payload: Any) -> dict[str, Any]:
        ...

    resolver = CallableResolver(load_report)
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from cachegate.resolvers.base import BackingSourceResolver, ResolutionFailed

ResolveFunc = Callable[[str, Any], Any | Awaitable[Any]]


class CallableResolver(BackingSourceResolver):
    """Resolver backed by a caller-supplied function."""

    def __init__(self, func: ResolveFunc):
        self.func = func

    async def resolve(self, key: str, payload: Any = None) -> Any:
        try:
            value = self.func(key, payload)
            if inspect.isawaitable(value):
                value = await value
        except ResolutionFailed:
            raise
        except Exception as e:
            raise ResolutionFailed(key, str(e) or e.__class__.__name__) from e
        return value
