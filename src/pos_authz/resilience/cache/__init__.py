"""Resilience – Cache-Aside policy."""
from pos_authz.resilience.cache.aside import CacheAsidePolicy, InMemoryTTLCache, SimpleCache

__all__ = ["CacheAsidePolicy", "InMemoryTTLCache", "SimpleCache"]
