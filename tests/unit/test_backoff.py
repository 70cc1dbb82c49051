from rag_ingestion.tracking.backoff import error_retry_delay, summary_poll_delay


class TestSummaryPollDelay:
    def test_early_attempts_poll_every_five_seconds(self) -> None:
        assert summary_poll_delay(1) == 5.0
        assert summary_poll_delay(10) == 5.0

    def test_grows_with_attempts(self) -> None:
        assert summary_poll_delay(11) == 10.0
        assert summary_poll_delay(31) == 30.0
        assert summary_poll_delay(61) == 60.0


class TestErrorRetryDelay:
    def test_doubles_per_consecutive_error(self) -> None:
        assert error_retry_delay(1) == 5.0
        assert error_retry_delay(2) == 10.0
        assert error_retry_delay(3) == 20.0

    def test_capped_at_thirty_seconds(self) -> None:
        assert error_retry_delay(4) == 30.0
        assert error_retry_delay(10) == 30.0
