from openai_schema.core.config import NormalizerConfig, get_normalizer_config
from openai_schema.llm.formats import (
    InvalidToolNameError,
    build_function_tool,
    build_response_format,
    build_text_format,
)
from openai_schema.llm.schema_utils import (
    AnyOfConflictError,
    SchemaNode,
    SchemaNormalizationError,
    enforce_openai_subset,
    normalize,
)
from openai_schema.observability.logging import JsonFormatter, configure_logging
from openai_schema.schemas.schema import Schema, SchemaGenerationError

__all__ = [
    "AnyOfConflictError",
    "InvalidToolNameError",
    "JsonFormatter",
    "NormalizerConfig",
    "Schema",
    "SchemaGenerationError",
    "SchemaNode",
    "SchemaNormalizationError",
    "build_function_tool",
    "build_response_format",
    "build_text_format",
    "configure_logging",
    "enforce_openai_subset",
    "get_normalizer_config",
    "normalize",
]
