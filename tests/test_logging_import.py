"""
Test that walletrisk_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from walletrisk_logging and use the logger."""
    from walletrisk.walletrisk_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_short_wallet():
    from walletrisk.walletrisk_logging import short_wallet

    assert short_wallet("0x" + "a" * 40) == "0x" + "a" * 14 + "..."
    assert short_wallet("0xabc") == "0xabc"
    assert short_wallet(None) == ""


def test_bind_wallet_logs():
    from structlog.testing import capture_logs

    from walletrisk.walletrisk_logging import bind_wallet

    with capture_logs() as logs:
        bind_wallet("0x" + "b" * 40).info("wallet_analysis_start", chain_id=84532)

    assert logs[0]["event"] == "wallet_analysis_start"
    assert logs[0]["wallet_id"] == "0xbbbbbbbbbbbbbb..."
    assert logs[0]["chain_id"] == 84532


def test_wallet_fields_truncated_before_rendering():
    from walletrisk.walletrisk_logging.logger import _stamp_event, _truncate_wallets

    event = {"event": "aml_result_fetched", "wallet_id": "0x" + "c" * 40, "address": "0xshort"}
    event = _stamp_event(None, "info", _truncate_wallets(None, "info", event))

    assert event["event_type"] == "aml_result_fetched"
    assert "event" not in event
    assert event["wallet_id"] == "0x" + "c" * 14 + "..."
    assert event["address"] == "0xshort"
    assert event["service"] == "walletrisk"
    assert event["timestamp"].endswith("+00:00")
