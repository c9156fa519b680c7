"""Basic end-to-end test for the summary metric."""

import threading

import pytest

from summarymetrics import CollectorRegistry, ManualTimeProvider, Summary


def test_basic_summary():
    """Observations, timers and collection work together through a registry."""
    registry = CollectorRegistry()
    clock = ManualTimeProvider()
    request_size = Summary("requests_size_bytes", "Request size in bytes.", registry=registry)
    request_latency = Summary(
        "requests_latency_seconds",
        "Request latency in seconds.",
        labelnames=("handler",),
        time_provider=clock,
        registry=registry,
    )

    def process_request(size, duration):
        timer = request_latency.labels("upload").start_timer()
        try:
            clock.advance(duration)
        finally:
            request_size.observe(size)
            timer.observe_duration()

    for i in range(1, 11):
        process_request(size=i, duration=i / 10)

    # Observe 1..10: count 10, sum 55, median 5.5
    assert registry.get_sample_value("requests_size_bytes_count") == 10
    assert registry.get_sample_value("requests_size_bytes_sum") == pytest.approx(55)
    assert registry.get_sample_value("requests_size_bytes", {"quantile": "0.5"}) == pytest.approx(5.5)

    labels = {"handler": "upload"}
    assert registry.get_sample_value("requests_latency_seconds_count", labels) == 10
    assert registry.get_sample_value("requests_latency_seconds_sum", labels) == pytest.approx(5.5)
    assert registry.get_sample_value(
        "requests_latency_seconds", {"handler": "upload", "quantile": "0.999"}
    ) == pytest.approx(1.0)


def test_collect_while_observing():
    """Collection runs alongside writers and sees a consistent sample size."""
    registry = CollectorRegistry()
    summary = Summary("work_seconds", "Work.", reservoir_size=50, registry=registry)
    stop = threading.Event()

    def writer():
        value = 0.0
        while not stop.is_set():
            summary.observe(value)
            value += 1.0

    threads = [threading.Thread(target=writer) for _ in range(4)]
    for t in threads:
        t.start()
    try:
        for _ in range(50):
            family = next(iter(registry.collect()))
            assert len(family.samples) == 7
    finally:
        stop.set()
        for t in threads:
            t.join()

    assert registry.get_sample_value("work_seconds_count") > 0
