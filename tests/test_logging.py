"""
Tests for logging setup.
"""

import io
import json
import logging

from collapsegraph.logging_config import JSONFormatter, configure_logging


class TestJSONFormatter:

    def _record(self, **extra):
        record = logging.LogRecord(
            name="collapsegraph.spine", level=logging.INFO, pathname=__file__,
            lineno=1, msg="Spine computed: %d classes", args=(6,), exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_fields(self):
        entry = json.loads(JSONFormatter().format(self._record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "collapsegraph.spine"
        assert entry["message"] == "Spine computed: 6 classes"
        assert "timestamp" in entry

    def test_extra_fields(self):
        entry = json.loads(JSONFormatter().format(self._record(chain_hash_short="abcd", classes=6)))
        assert entry["chain_hash_short"] == "abcd"
        assert entry["classes"] == 6

    def test_unknown_extras_dropped(self):
        entry = json.loads(JSONFormatter().format(self._record(secret="x")))
        assert "secret" not in entry


class TestConfigureLogging:

    def test_json_output(self):
        stream = io.StringIO()
        configure_logging("INFO", json_format=True, stream=stream)
        logging.getLogger("collapsegraph.test").info("hello")
        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "hello"

    def test_level_filters(self):
        stream = io.StringIO()
        configure_logging("WARNING", stream=stream)
        logging.getLogger("collapse_kernel.test").info("hidden")
        logging.getLogger("collapse_kernel.test").warning("shown")
        text = stream.getvalue()
        assert "hidden" not in text
        assert "shown" in text

    def test_reconfigure_replaces_handler(self):
        first = io.StringIO()
        second = io.StringIO()
        configure_logging("INFO", stream=first)
        configure_logging("INFO", stream=second)
        logging.getLogger("collapsegraph.test").info("once")
        assert first.getvalue() == ""
        assert "once" in second.getvalue()
