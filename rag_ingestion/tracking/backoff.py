# (attempts above, delay seconds), checked in order
SUMMARY_POLL_SCHEDULE: tuple[tuple[int, float], ...] = ((60, 60.0), (30, 30.0), (10, 10.0))
DEFAULT_SUMMARY_POLL_SECONDS = 5.0

ERROR_RETRY_BASE_SECONDS = 5.0
ERROR_RETRY_CAP_SECONDS = 30.0


def summary_poll_delay(attempt: int) -> float:
    """Delay before the next summary poll, growing as the document stays in flight."""
    for threshold, delay in SUMMARY_POLL_SCHEDULE:
        if attempt > threshold:
            return delay
    return DEFAULT_SUMMARY_POLL_SECONDS


def error_retry_delay(consecutive_errors: int) -> float:
    """Exponential retry delay after failed fetches, capped."""
    exponent = max(consecutive_errors - 1, 0)
    return min(ERROR_RETRY_BASE_SECONDS * 2**exponent, ERROR_RETRY_CAP_SECONDS)
