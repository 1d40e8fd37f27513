"""Unit tests for the JSON log formatter."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import json
import logging
from logger import JSONFormatter


def _record(msg="hello", **extra):
    record = logging.LogRecord("services.flow_controller", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    def test_basic_fields(self):
        """Test the standard fields are present."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "services.flow_controller"
        assert data["message"] == "hello"
        assert data["timestamp"].endswith("Z")

    def test_extra_fields_are_lifted(self):
        """Test known extra fields appear and unknown ones do not."""
        record = _record(session_id="sess_abc", question_index=2, unrelated="x")
        data = json.loads(JSONFormatter().format(record))

        assert data["session_id"] == "sess_abc"
        assert data["question_index"] == 2
        assert "unrelated" not in data
