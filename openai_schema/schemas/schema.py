from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, PydanticUserError, TypeAdapter
from pydantic.errors import PydanticInvalidForJsonSchema, PydanticSchemaGenerationError

from openai_schema.core.config import NormalizerConfig
from openai_schema.llm.schema_utils import SchemaNormalizationError, enforce_openai_subset

logger = logging.getLogger(__name__)


class SchemaGenerationError(Exception):
    pass


def _default_name(target: Any, raw_schema: dict[str, Any]) -> str:
    title = raw_schema.get("title")
    if isinstance(title, str) and title:
        return title
    return getattr(target, "__name__", None) or "schema"


class Schema(BaseModel):
    """A JSON Schema that is compatible with OpenAI's function calling API."""

    model_config = ConfigDict(frozen=True)

    value: dict[str, Any]
    name: str

    @classmethod
    def new(cls, target: Any, config: NormalizerConfig | None = None) -> Schema:
        """Build the schema of a pydantic model, or of any type pydantic understands."""
        try:
            if isinstance(target, type) and issubclass(target, BaseModel):
                raw_schema = target.model_json_schema()
            else:
                raw_schema = TypeAdapter(target).json_schema()
        except (PydanticSchemaGenerationError, PydanticInvalidForJsonSchema, PydanticUserError) as exc:
            logger.exception(
                "schema.generation.failed",
                extra={"schema_name": getattr(target, "__name__", repr(target)), "error_code": "generation_failed"},
            )
            raise SchemaGenerationError(f"Could not generate a JSON Schema for {target!r}") from exc

        return cls.from_json_schema(raw_schema, name=_default_name(target, raw_schema), config=config)

    @classmethod
    def from_json_schema(
        cls,
        schema: dict[str, Any],
        name: str | None = None,
        config: NormalizerConfig | None = None,
    ) -> Schema:
        try:
            value = enforce_openai_subset(schema, config)
        except SchemaNormalizationError:
            logger.error("schema.normalization.failed", extra={"schema_name": name, "error_code": "normalization_failed"})
            raise

        schema_name = name or _default_name(None, value)
        logger.debug("schema.normalized", extra={"schema_name": schema_name})
        return cls(value=value, name=schema_name)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.value, indent=indent, ensure_ascii=False)
