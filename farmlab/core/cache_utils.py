"""
Caching utilities for expensive analytics computations.
Uses Redis (django-redis) in production, any Django cache backend otherwise.
"""
from django.conf import settings
from django.core.cache import cache
import hashlib
import logging

logger = logging.getLogger(__name__)

GENERATION_KEY = 'analytics:generation'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def get_generation():
    """Current analytics generation; bumped whenever source data changes"""
    generation = cache.get(GENERATION_KEY)
    if generation is None:
        generation = 1
        cache.set(GENERATION_KEY, generation, None)
    return generation


def bump_generation():
    """Invalidate every cached analytics payload at once"""
    try:
        cache.incr(GENERATION_KEY)
    except ValueError:
        # Key expired or was evicted
        cache.set(GENERATION_KEY, 2, None)


def get_cached_analytics(name, **params):
    """
    Get a cached analytics payload
    Returns tuple: (cached_data, cache_key)
    """
    cache_key = make_cache_key(f"analytics:{name}", get_generation(), **params)
    return cache.get(cache_key), cache_key


def cache_analytics(cache_key, data, ttl=None):
    """Cache an analytics payload"""
    if ttl is None:
        ttl = settings.ANALYTICS_CACHE_TTL
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached analytics payload: {cache_key}")
