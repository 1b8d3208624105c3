"""
Tests for error classification and client-facing messages
"""

import logging

from core.error_handling import (
    BodyParseError,
    ContactValidationError,
    ErrorSeverity,
    PayloadTooLargeError,
    StorageError,
    classify_error,
    log_error,
    public_error_message,
)


def test_client_errors_are_low_severity():
    ctx = classify_error(PayloadTooLargeError("too big", component="contact"), "router")

    assert ctx.status_code == 413
    assert ctx.severity == ErrorSeverity.LOW
    assert ctx.component == "contact"


def test_unknown_exceptions_are_server_errors():
    ctx = classify_error(KeyError("x"), "router", {"path": "/"})

    assert ctx.status_code == 500
    assert ctx.severity == ErrorSeverity.HIGH
    assert ctx.component == "router"
    assert ctx.context_data == {"path": "/"}


def test_exception_context_is_merged():
    exc = StorageError("disk full", component="contact_store", context={"path": "/tmp/x"})

    ctx = classify_error(exc, "contact", {"submission_id": "abc"})

    assert ctx.context_data == {"submission_id": "abc", "path": "/tmp/x"}
    assert ctx.to_dict()["severity"] == "high"


def test_public_messages_hide_internal_detail():
    assert public_error_message(ContactValidationError("Please enter a valid email address.")) \
        == "Please enter a valid email address."
    assert public_error_message(BodyParseError("Expecting value: line 1")) \
        == "Request body could not be parsed."
    assert "disk" not in public_error_message(StorageError("disk full"))
    assert public_error_message(RuntimeError("boom")) == "Unexpected server error"


def test_log_error_levels(caplog):
    logger = logging.getLogger("tests.error_handling")

    with caplog.at_level(logging.INFO, logger="tests.error_handling"):
        log_error(classify_error(StorageError("disk full"), "contact"), logger)
        log_error(classify_error(ContactValidationError("bad email"), "contact"), logger)

    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.ERROR, logging.INFO]
    assert caplog.records[0].status_code == 500
