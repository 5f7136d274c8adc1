"""Backing source resolvers for cachegate.

- BackingSourceResolver: resolve(key, payload) contract
- HttpResolver: fetch from an upstream JSON API with httpx
- CallableResolver: wrap a local function
"""

from cachegate.resolvers.base import BackingSourceResolver, ResolutionFailed
from cachegate.resolvers.callable import CallableResolver
from cachegate.resolvers.http import HttpResolver

__all__ = [
    "BackingSourceResolver",
    "CallableResolver",
    "HttpResolver",
    "ResolutionFailed",
]
