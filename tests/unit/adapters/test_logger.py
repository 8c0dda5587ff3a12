import logging

from src.adapter.services.logger import ContextFormatter, StructuredLogger, configure_logging
from src.domain.exceptions import UserNotFoundError


def test_child_merges_context(caplog):
    logger = StructuredLogger("tests.logger", {"service": "users"})
    child = logger.child({"operation": "CreateUser"})

    with caplog.at_level(logging.INFO, logger="tests.logger"):
        child.info("operations.user.creation_attempt", {"target_email": "a@b.co"})

    record = caplog.records[-1]
    assert record.getMessage() == "operations.user.creation_attempt"
    assert record.context == {"service": "users", "operation": "CreateUser", "target_email": "a@b.co"}
    assert logger.context == {"service": "users"}


def test_error_carries_error_details(caplog):
    logger = StructuredLogger("tests.logger")

    with caplog.at_level(logging.ERROR, logger="tests.logger"):
        logger.error("operations.failed", UserNotFoundError("u-1"), {"duration_ms": 3})

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.context["error_type"] == "UserNotFoundError"
    assert record.context["error_code"] == "USER_NOT_FOUND"
    assert record.context["duration_ms"] == 3


def test_audit_goes_to_audit_logger(caplog):
    audit_logger = logging.getLogger("tests.audit")
    logger = StructuredLogger("tests.logger", {"operation": "DeleteUser"}, audit_logger=audit_logger)

    with caplog.at_level(logging.INFO, logger="tests.audit"):
        logger.audit("audit.user.deleted", "admin-id", {"target_user_id": "u-1"})

    record = caplog.records[-1]
    assert record.name == "tests.audit"
    assert record.getMessage() == "audit.user.deleted"
    assert record.context == {"operation": "DeleteUser", "target_user_id": "u-1", "actor_id": "admin-id"}


def test_context_formatter_renders_pairs():
    formatter = ContextFormatter("%(message)s%(context_text)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    record.context = {"user_id": "u-1", "skipped": None}

    assert formatter.format(record) == "hello user_id=u-1"


def test_configure_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        configure_logging("debug")
        configure_logging("debug")
        added = [handler for handler in root.handlers if handler not in before]
        assert len(added) <= 1
        assert root.level == logging.DEBUG
    finally:
        for handler in [handler for handler in root.handlers if handler not in before]:
            root.removeHandler(handler)
