from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from openai_schema import JsonFormatter, configure_logging
from openai_schema.llm.schema_utils import normalize
from openai_schema.schemas.schema import Schema, SchemaGenerationError


class Opaque:
    pass


def _json_logs(records: list[logging.LogRecord]) -> list[dict[str, Any]]:
    formatter = JsonFormatter()
    return [json.loads(formatter.format(record)) for record in records if record.name.startswith("openai_schema.")]


def test_normalization_logs_carry_path_and_keyword(caplog: Any) -> None:
    caplog.set_level(logging.DEBUG, logger="openai_schema")

    normalize(
        {
            "type": "object",
            "properties": {"when": {"type": "string", "format": "date-time"}},
            "allOf": [{"type": "object"}],
        }
    )

    logs = _json_logs(caplog.records)
    removed = [log for log in logs if log["message"] == "schema.keyword.removed"]
    renamed = [log for log in logs if log["message"] == "schema.keyword.renamed"]

    assert removed == [
        {
            "timestamp": removed[0]["timestamp"],
            "level": "DEBUG",
            "message": "schema.keyword.removed",
            "logger": "openai_schema.llm.schema_utils",
            "path": "/properties/when",
            "keyword": "format",
        }
    ]
    assert renamed[0]["path"] == "/"
    assert renamed[0]["keyword"] == "allOf"


def test_generation_failure_logs_exception(caplog: Any) -> None:
    caplog.set_level(logging.INFO, logger="openai_schema")

    with pytest.raises(SchemaGenerationError):
        Schema.new(Opaque)

    logs = _json_logs(caplog.records)
    failure = next(log for log in logs if log["message"] == "schema.generation.failed")
    assert failure["level"] == "ERROR"
    assert failure["schema_name"] == "Opaque"
    assert failure["error_code"] == "generation_failed"
    assert "PydanticSchemaGenerationError" in failure["exception"]


def test_configure_logging_installs_json_handler() -> None:
    root_logger = logging.getLogger()
    previous_handlers = root_logger.handlers[:]
    previous_level = root_logger.level
    try:
        configure_logging("DEBUG")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)
    finally:
        root_logger.handlers = previous_handlers
        root_logger.setLevel(previous_level)
