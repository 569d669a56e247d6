from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from openai.types.shared_params import FunctionDefinition, ResponseFormatJSONSchema

from openai_schema.llm.schema_utils import enforce_openai_subset
from openai_schema.schemas.schema import Schema

if TYPE_CHECKING:
    from openai.types.chat import ChatCompletionToolParam
    from openai.types.responses import ResponseTextConfigParam

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


class InvalidToolNameError(ValueError):
    pass


def _resolve(schema: Schema | dict[str, Any], name: str | None) -> tuple[dict[str, Any], str]:
    if isinstance(schema, Schema):
        value = schema.value
        resolved_name = name or schema.name
    else:
        value = enforce_openai_subset(schema)
        resolved_name = name or value.get("title") or ""

    if not isinstance(resolved_name, str) or not _NAME_RE.match(resolved_name):
        raise InvalidToolNameError(
            f"Invalid name {resolved_name!r}: expected 1-64 characters from a-z, A-Z, 0-9, '_' and '-'"
        )
    return value, resolved_name


def build_function_tool(
    schema: Schema | dict[str, Any],
    *,
    name: str | None = None,
    description: str | None = None,
    strict: bool = True,
) -> ChatCompletionToolParam:
    parameters, tool_name = _resolve(schema, name)
    function: FunctionDefinition = {"name": tool_name, "parameters": parameters, "strict": strict}
    if description is not None:
        function["description"] = description

    logger.debug("schema.tool.built", extra={"schema_name": tool_name})
    return {"type": "function", "function": function}


def build_response_format(
    schema: Schema | dict[str, Any],
    *,
    name: str | None = None,
    description: str | None = None,
    strict: bool = True,
) -> ResponseFormatJSONSchema:
    value, format_name = _resolve(schema, name)
    json_schema: dict[str, Any] = {"name": format_name, "schema": value, "strict": strict}
    if description is not None:
        json_schema["description"] = description
    return {"type": "json_schema", "json_schema": json_schema}  # type: ignore[typeddict-item]


def build_text_format(
    schema: Schema | dict[str, Any],
    *,
    name: str | None = None,
    description: str | None = None,
    strict: bool = True,
) -> ResponseTextConfigParam:
    value, format_name = _resolve(schema, name)
    text_format: dict[str, Any] = {
        "type": "json_schema",
        "name": format_name,
        "schema": value,
        "strict": strict,
    }
    if description is not None:
        text_format["description"] = description
    return {"format": text_format}  # type: ignore[typeddict-item]
