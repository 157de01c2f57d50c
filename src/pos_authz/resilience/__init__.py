"""Resilience – timeout and cache-aside policies for remote lookups."""
from pos_authz.resilience.cache import CacheAsidePolicy, InMemoryTTLCache, SimpleCache
from pos_authz.resilience.timeouts import TimeoutPolicy

__all__ = ["CacheAsidePolicy", "InMemoryTTLCache", "SimpleCache", "TimeoutPolicy"]
