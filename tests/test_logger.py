"""
Tests for the JSON-lines run logger.
"""

import json
import logging
import uuid

from yt_transcriber.logging_core.logger import JSONFormatter, get_logger, log_event


class TestGetLogger:

    def test_idempotent_per_run(self):
        run_id = uuid.uuid4()

        first = get_logger(run_id)
        second = get_logger(run_id)

        assert first is second
        assert len(first.handlers) == 1
        assert first.propagate is False

    def test_level_applies_to_existing_logger(self):
        """A later explicit level wins; a bare lookup leaves it alone."""
        run_id = uuid.uuid4()

        get_logger(run_id)
        logger = get_logger(run_id, "DEBUG")
        get_logger(run_id)

        assert logger.level == logging.DEBUG

    def test_distinct_runs(self):
        assert get_logger(uuid.uuid4()) is not get_logger(uuid.uuid4())

    def test_writes_to_stderr(self, capsys):
        logger = get_logger(uuid.uuid4())

        log_event(logger, logging.INFO, "hello", event_type="progress")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert json.loads(captured.err.strip())["message"] == "hello"


class TestJSONFormatter:

    def _format(self, **extra):
        record = logging.LogRecord("test", logging.WARNING, __file__, 1, "Duration mismatch", None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return json.loads(JSONFormatter().format(record))

    def test_structured_fields(self):
        run_id = uuid.uuid4()

        payload = self._format(
            run_id=run_id,
            video_id="jNQXAC9IVRw",
            stage_name="verify_primary",
            event_type="progress",
            metadata={"actual": 12.0, "expected": 19.0},
        )

        assert payload["level"] == "WARNING"
        assert payload["message"] == "Duration mismatch"
        assert payload["run_id"] == str(run_id)
        assert payload["video_id"] == "jNQXAC9IVRw"
        assert payload["stage_name"] == "verify_primary"
        assert payload["metadata"] == {"actual": 12.0, "expected": 19.0}
        assert payload["timestamp"].endswith("Z")

    def test_optional_fields_omitted(self):
        payload = self._format()

        assert "stage_name" not in payload
        assert "video_id" not in payload
        assert "metadata" not in payload
