import io
import json
import logging

from portfolio_vault.logging_config import (
    DEFAULT_ENV,
    JsonFormatter,
    configure_logging,
    error_log_extra,
    structured_log_extra,
)
from portfolio_vault.operations.exceptions import SlippageExceeded


def _build_logger(stream: io.StringIO) -> logging.Logger:
    logger = logging.getLogger("portfolio_vault.test.logging")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger.handlers = [handler]
    return logger


def test_structured_log_extra_adds_common_identifiers():
    extra = structured_log_extra(
        event="deposit_completed",
        index_id="usdc",
        operation="deposit",
        account="alice",
        amount_in=2000,
    )

    assert extra["event"] == "deposit_completed"
    assert extra["env"] == DEFAULT_ENV
    assert extra["index_id"] == "usdc"
    assert extra["operation"] == "deposit"
    assert extra["account"] == "alice"
    assert extra["amount_in"] == 2000

    minimal_extra = structured_log_extra()
    assert "account" not in minimal_extra
    assert minimal_extra["index_id"] is None


def test_json_formatter_preserves_extra_fields():
    stream = io.StringIO()
    logger = _build_logger(stream)

    logger.info(
        "log message",
        extra=structured_log_extra(
            event="withdraw_failed",
            index_id="usdc",
            account="bob",
            error_code="slippage_exceeded",
            retryable=True,
        ),
    )

    payload = json.loads(stream.getvalue())

    assert payload["event"] == "withdraw_failed"
    assert payload["index_id"] == "usdc"
    assert payload["account"] == "bob"
    assert payload["error_code"] == "slippage_exceeded"
    assert payload["retryable"] is True
    assert payload["env"] == DEFAULT_ENV
    assert payload["message"] == "log message"


def test_json_formatter_keeps_vault_keys_and_traceback():
    stream = io.StringIO()
    logger = _build_logger(stream)

    try:
        raise RuntimeError("rpc timeout")
    except RuntimeError:
        logger.exception("pool call failed")

    payload = json.loads(stream.getvalue())

    assert payload["index_id"] is None
    assert payload["operation"] is None
    assert "RuntimeError: rpc timeout" in payload["exc_info"]


def test_error_log_extra_distinguishes_vault_errors():
    vault_extra = error_log_extra(
        SlippageExceeded("usdc", 10, 5), operation="withdraw", account="bob"
    )
    assert vault_extra["event"] == "withdraw_failed"
    assert vault_extra["index_id"] == "usdc"
    assert vault_extra["error_code"] == "slippage_exceeded"
    assert vault_extra["retryable"] is True

    other_extra = error_log_extra(
        RuntimeError("boom"), operation="deposit", index_id="dai"
    )
    assert other_extra["event"] == "deposit_failed"
    assert other_extra["index_id"] == "dai"
    assert other_extra["error_code"] == "unexpected_error"
    assert other_extra["retryable"] is False
    assert "account" not in other_extra


def test_configure_logging_installs_single_handler():
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        configure_logging(level=logging.DEBUG, env="dev")
        configure_logging(level=logging.WARNING, env="dev", json_output=False)

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers, level = saved
        root.setLevel(level)
