"""
Tests for logging setup.
"""

import json
import logging
import sys
from io import StringIO

import pytest

from aphrodite.logs import JSONFormatter, TextFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    urllib3 = logging.getLogger("urllib3")
    handlers, level, urllib3_level = list(root.handlers), root.level, urllib3.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    urllib3.setLevel(urllib3_level)


def make_record(msg="Test message", args=(), level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="JiraAdapter",
        level=level,
        pathname="adapter.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


# =============================================================================
# JSONFormatter Tests
# =============================================================================


class TestJSONFormatter:
    """Tests for the JSON log formatter."""

    def test_basic_format(self):
        parsed = json.loads(JSONFormatter().format(make_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "JiraAdapter"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_message_args(self):
        parsed = json.loads(JSONFormatter().format(make_record("Fetched %d issues", (55,))))

        assert parsed["message"] == "Fetched 55 issues"

    def test_extra_fields(self):
        record = make_record()
        record.issue_key = "EAP-1"

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["issue_key"] == "EAP-1"
        assert "pathname" not in parsed

    def test_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert "ValueError: boom" in parsed["exception"]

    def test_non_serializable_extra(self):
        record = make_record()
        record.payload = object()

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["payload"].startswith("<object object")


class TestTextFormatter:
    """Tests for the text formatter."""

    def test_format(self):
        output = TextFormatter().format(make_record(level=logging.WARNING))

        assert "WARNING" in output
        assert "JiraAdapter: Test message" in output


# =============================================================================
# setup_logging Tests
# =============================================================================


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_text_output(self):
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)

        get_logger("JiraApiClient").debug("Connecting")

        assert "DEBUG" in stream.getvalue()
        assert "JiraApiClient: Connecting" in stream.getvalue()

    def test_json_output(self):
        stream = StringIO()
        setup_logging(log_format="json", stream=stream)

        get_logger("CommentDispatcher").info("Posted")

        parsed = json.loads(stream.getvalue().strip())
        assert parsed["logger"] == "CommentDispatcher"
        assert parsed["message"] == "Posted"

    def test_level_filters(self):
        stream = StringIO()
        setup_logging(level=logging.WARNING, stream=stream)

        get_logger("JiraAdapter").info("hidden")

        assert stream.getvalue() == ""

    def test_replaces_handlers(self):
        setup_logging(stream=StringIO())
        root = setup_logging(stream=StringIO())

        assert len(root.handlers) == 1

    def test_quiets_urllib3(self):
        setup_logging(level=logging.DEBUG, stream=StringIO())

        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown log format"):
            setup_logging(log_format="xml")
