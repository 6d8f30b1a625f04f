"""
metrics.py - Matching metrics for monitoring
"""
from prometheus_client import Counter, Histogram, Gauge, generate_latest
from functools import wraps
import time

from config import settings

# Metrics definitions
match_requests = Counter(
    'recog_match_requests_total',
    'Total match requests',
    ['operation']  # 'text', 'base64', 'batch'
)

match_outcomes = Counter(
    'recog_matches_total',
    'Match outcomes per input',
    ['outcome']  # 'matched' or 'unmatched'
)

match_duration = Histogram(
    'recog_match_duration_seconds',
    'Time spent scanning the fingerprint database',
    ['operation']
)

fingerprints_loaded = Gauge(
    'recog_fingerprints_loaded',
    'Number of fingerprints in the most recently loaded database'
)

pattern_matcher_calls = Counter(
    'recog_pattern_matcher_calls_total',
    'Pattern matcher plugin invocations',
    ['matcher', 'outcome']
)


def record_match(operation: str, result_count: int):
    """Record a single match request and its outcome"""
    if not settings.enable_metrics:
        return
    match_requests.labels(operation).inc()
    match_outcomes.labels('matched' if result_count else 'unmatched').inc()


def record_pattern_matcher_call(matcher: str, matched: bool):
    """Record a pattern matcher plugin invocation"""
    if not settings.enable_metrics:
        return
    pattern_matcher_calls.labels(matcher, 'matched' if matched else 'unmatched').inc()


def track_duration(operation: str):
    """Decorator to track how long a matching operation takes"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not settings.enable_metrics:
                return func(*args, **kwargs)
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                match_duration.labels(operation).observe(time.perf_counter() - start)
        return wrapper
    return decorator


def get_metrics():
    """Get Prometheus metrics"""
    return generate_latest()
