"""Tests for the TTL cache."""

from fundpulse.cache import DEFAULT_TTL, TTLCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestTTLCache:
    """Tests for TTLCache."""

    def test_hit_before_expiry(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set('k', {'a': 1}, ttl=10)
        clock.advance(9.9)
        assert cache.get('k') == {'a': 1}

    def test_miss_after_expiry_removes_entry(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set('k', 'v', ttl=10)
        clock.advance(10)
        assert 'k' in cache
        assert cache.get('k') is None
        assert 'k' not in cache

    def test_default_ttl_is_five_minutes(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        assert cache.default_ttl == DEFAULT_TTL == 300
        cache.set('k', 'v')
        clock.advance(299)
        assert cache.get('k') == 'v'
        clock.advance(1)
        assert cache.get('k') is None

    def test_missing_key(self):
        assert TTLCache().get('nope') is None

    def test_sweep_purges_only_expired(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set('short', 1, ttl=5)
        cache.set('long', 2, ttl=60)
        clock.advance(30)
        assert cache.sweep() == 1
        assert len(cache) == 1
        assert cache.get('long') == 2

    def test_delete_and_clear(self):
        cache = TTLCache()
        cache.set('a', 1)
        cache.set('b', 2)
        cache.delete('a')
        cache.delete('missing')
        assert cache.get('a') is None
        cache.clear()
        assert len(cache) == 0

    def test_overwrite_resets_expiry(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set('k', 'old', ttl=10)
        clock.advance(8)
        cache.set('k', 'new', ttl=10)
        clock.advance(8)
        assert cache.get('k') == 'new'
