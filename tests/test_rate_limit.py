from utils.rate_limit import RateLimiter


class Ticker:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_up_to_limit_within_window():
    ticker = Ticker()
    limiter = RateLimiter(3, 60, clock=ticker)

    assert [limiter("buyer-1") for _ in range(4)] == [True, True, True, False]
    assert limiter("buyer-2") is True


def test_window_slides():
    ticker = Ticker()
    limiter = RateLimiter(2, 60, clock=ticker)
    limiter("buyer-1")
    ticker.now += 30
    limiter("buyer-1")

    assert limiter("buyer-1") is False

    ticker.now += 31
    assert limiter("buyer-1") is True
    assert limiter("buyer-1") is False


def test_reset():
    limiter = RateLimiter(1, 60, clock=Ticker())
    limiter("buyer-1")
    limiter.reset("buyer-1")

    assert limiter("buyer-1") is True
