"""
Test-friendly helpers for caching.

Some lookups in Activity Share never change while a process is running, e.g.
which storage backend holds our files. We still want to be able to reset those
caches between test runs, when settings are overridden.
"""
import functools

# List of functions that have been wrapped with our lru_cache.
_lru_cached_fns = []


def lru_cache(*args, **kwargs):
    """
    Thin wrapper over functools.lru_cache that lets us clear all caches later.
    """
    def decorator(fn):
        wrapped_fn = functools.lru_cache(*args, **kwargs)(fn)
        _lru_cached_fns.append(wrapped_fn)
        return wrapped_fn
    return decorator


def clear_lru_caches():
    """
    Clear all LRU caches that use our lru_cache decorator.

    Useful for tests.
    """
    for fn in _lru_cached_fns:
        fn.cache_clear()
