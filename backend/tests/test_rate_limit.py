from utils.rate_limit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 500.0

    def __call__(self):
        return self.now


def test_hits_up_to_the_limit_are_allowed():
    limiter = RateLimiter("login", limit=5, interval_seconds=900, clock=FakeClock())

    results = [limiter.hit("10.0.0.1") for _ in range(6)]

    assert results == [True, True, True, True, True, False]


def test_keys_are_counted_separately():
    limiter = RateLimiter("signup", limit=1, interval_seconds=3600, clock=FakeClock())

    assert limiter.hit("10.0.0.1") is True
    assert limiter.hit("10.0.0.2") is True
    assert limiter.hit("10.0.0.1") is False


def test_window_starts_over_after_the_interval():
    clock = FakeClock()
    limiter = RateLimiter("login", limit=2, interval_seconds=900, clock=clock)
    limiter.hit("10.0.0.1")
    limiter.hit("10.0.0.1")
    assert limiter.hit("10.0.0.1") is False

    clock.now += 899
    assert limiter.hit("10.0.0.1") is False
    clock.now += 1
    assert limiter.hit("10.0.0.1") is True


def test_least_recently_used_key_is_forgotten():
    limiter = RateLimiter("signup", limit=1, interval_seconds=3600, max_keys=2, clock=FakeClock())
    limiter.hit("a")
    limiter.hit("b")
    limiter.hit("c")

    # "a" was evicted, so it gets a fresh window
    assert limiter.hit("a") is True
    assert limiter.hit("c") is False
