from smarkant.api.request_security import RequestFreshnessCheck, parse_timestamp_ms


def test_parse_timestamp_ms_supports_iso_seconds_and_milliseconds() -> None:
    assert parse_timestamp_ms("2023-11-14T22:13:20Z") == 1_700_000_000_000
    assert parse_timestamp_ms("2023-11-14T22:13:20") == 1_700_000_000_000
    assert parse_timestamp_ms("1700000000") == 1_700_000_000_000
    assert parse_timestamp_ms(1_700_000_000_000) == 1_700_000_000_000
    assert parse_timestamp_ms("bad") is None
    assert parse_timestamp_ms("") is None
    assert parse_timestamp_ms(None) is None


def test_freshness_check_accepts_recent_requests() -> None:
    check = RequestFreshnessCheck(tolerance_seconds=150, _now_fn=lambda: 1_700_000_000_000)
    assert check.validate("2023-11-14T22:13:20Z") == (True, "ok")
    assert check.validate("2023-11-14T22:15:50Z") == (True, "ok")


def test_freshness_check_rejects_stale_and_missing_timestamps() -> None:
    check = RequestFreshnessCheck(tolerance_seconds=150, _now_fn=lambda: 1_700_000_000_000)
    assert check.validate("2023-11-14T22:15:51Z") == (False, "stale_timestamp")
    assert check.validate("2017-10-01T12:00:00Z") == (False, "stale_timestamp")
    assert check.validate(None) == (False, "missing_timestamp")
