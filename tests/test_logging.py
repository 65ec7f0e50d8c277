#!/usr/bin/env python3
"""Tests for logging setup."""

from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import io
import json
import logging

from clusterstudy.utils import JSONFormatter, setup_logger


class TestSetupLogger:

    def test_plain_format(self):
        stream = io.StringIO()
        logger = setup_logger("clusterstudy.tests.plain", level="INFO", stream=stream)

        logger.debug("hidden")
        logger.info("visible")

        output = stream.getvalue()
        assert "visible" in output
        assert "hidden" not in output
        assert "[INFO]" in output

    def test_json_format(self):
        stream = io.StringIO()
        logger = setup_logger("clusterstudy.tests.json", level=logging.DEBUG,
                              json_format=True, stream=stream)

        logger.warning("k=%d", 3)

        entry = json.loads(stream.getvalue().strip())
        assert entry["level"] == "WARNING"
        assert entry["message"] == "k=3"
        assert entry["logger"] == "clusterstudy.tests.json"
        assert "timestamp" in entry

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logger("clusterstudy.tests.file", log_file=log_file, stream=io.StringIO())

        logger.info("to file")
        for handler in logger.handlers:
            handler.flush()

        assert "to file" in log_file.read_text()
        for handler in logger.handlers:
            handler.close()

    def test_handlers_replaced(self):
        name = "clusterstudy.tests.repeat"
        setup_logger(name, stream=io.StringIO())
        logger = setup_logger(name, stream=io.StringIO())
        assert len(logger.handlers) == 1


class TestJSONFormatter:

    def test_exception_and_extra_fields(self):
        formatter = JSONFormatter(include_location=False, extra_fields={"run": "abc"})
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

        entry = json.loads(formatter.format(record))
        assert entry["exception"]["type"] == "ValueError"
        assert entry["run"] == "abc"
        assert "location" not in entry

