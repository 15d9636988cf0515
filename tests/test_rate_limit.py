"""Tests du limiteur de débit par client."""

from astrohuff.app.middleware_rate_limit import ClientLimiter


def test_limit_applies_per_client_and_window():
    limiter = ClientLimiter(qps=2)
    assert limiter.allow("a", now=10.0)
    assert limiter.allow("a", now=10.1)
    assert not limiter.allow("a", now=10.2)
    # un autre client dispose de son propre quota
    assert limiter.allow("b", now=10.2)
    # nouvelle fenêtre
    assert limiter.allow("a", now=11.05)


def test_expired_windows_are_evicted():
    limiter = ClientLimiter(qps=5)
    for i in range(100):
        limiter.allow(f"client-{i}", now=1.0)
    assert len(limiter) == 100

    limiter.allow("late", now=2.5)
    assert len(limiter) == 1


def test_blocked_request_does_not_extend_window():
    limiter = ClientLimiter(qps=1)
    assert limiter.allow("a", now=0.0)
    assert not limiter.allow("a", now=0.9)
    assert limiter.allow("a", now=1.0)
