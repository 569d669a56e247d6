from __future__ import annotations

import logging
from typing import Any, Union

from openai_schema.core.config import NormalizerConfig

logger = logging.getLogger(__name__)

SchemaNode = Union[None, bool, int, float, str, list["SchemaNode"], dict[str, "SchemaNode"]]

# Keywords whose value maps user chosen names to subschemas.
NAME_MAP_KEYWORDS = frozenset({"properties", "$defs", "definitions", "patternProperties", "dependentSchemas"})

_RENAMED_COMBINATORS = ("oneOf", "allOf")

_DEFAULT_CONFIG = NormalizerConfig()


class SchemaNormalizationError(Exception):
    pass


class AnyOfConflictError(SchemaNormalizationError):
    def __init__(self, keyword: str, path: str) -> None:
        super().__init__(f"renaming {keyword} would overwrite anyOf at {path or '/'}")
        self.keyword = keyword
        self.path = path


def _escape_pointer_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _child_path(path: str, token: str | int) -> str:
    return f"{path}/{_escape_pointer_token(str(token))}"


def _declares_object_schema(node: dict[str, Any], config: NormalizerConfig) -> bool:
    if "properties" in node:
        return True
    if not config.object_type_implies_object_schema:
        return False
    node_type = node.get("type")
    if isinstance(node_type, list):
        return "object" in node_type
    return node_type == "object"


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return list(value)
    return [value]


def _rename_to_any_of(node: dict[str, Any], keyword: str, config: NormalizerConfig, path: str) -> None:
    value = node.pop(keyword)
    if "anyOf" not in node:
        node["anyOf"] = value
        logger.debug("schema.keyword.renamed", extra={"path": path or "/", "keyword": keyword})
        return

    policy = config.any_of_conflict
    if policy == "reject":
        raise AnyOfConflictError(keyword, path)

    existing = node.pop("anyOf")
    if policy == "merge":
        node["anyOf"] = _as_list(existing) + _as_list(value)
    else:
        node["anyOf"] = value
    logger.debug(
        "schema.keyword.merged",
        extra={"path": path or "/", "keyword": keyword, "policy": policy},
    )


def _strip_disallowed(node: dict[str, Any], config: NormalizerConfig, path: str) -> None:
    for keyword in config.disallowed_keywords:
        if keyword in node:
            del node[keyword]
            logger.debug("schema.keyword.removed", extra={"path": path or "/", "keyword": keyword})


def _rename_combinators(node: dict[str, Any], config: NormalizerConfig, path: str) -> None:
    for keyword in _RENAMED_COMBINATORS:
        if keyword in node:
            _rename_to_any_of(node, keyword, config, path)


def _normalize_name_map(mapping: dict[str, Any], config: NormalizerConfig, path: str) -> dict[str, Any]:
    normalized = {name: _normalize_node(value, config, _child_path(path, name)) for name, value in mapping.items()}
    # Names of fields and definitions are keys too, unless explicitly kept.
    if not config.preserve_property_names:
        _strip_disallowed(normalized, config, path)
        _rename_combinators(normalized, config, path)
    return normalized


def _normalize_node(node: Any, config: NormalizerConfig, path: str) -> Any:
    if isinstance(node, list):
        return [_normalize_node(item, config, _child_path(path, index)) for index, item in enumerate(node)]
    if not isinstance(node, dict):
        return node

    normalized: dict[str, Any] = {}
    for key, value in node.items():
        child_path = _child_path(path, key)
        if key in NAME_MAP_KEYWORDS and isinstance(value, dict):
            normalized[key] = _normalize_name_map(value, config, child_path)
        else:
            normalized[key] = _normalize_node(value, config, child_path)

    _strip_disallowed(normalized, config, path)

    if _declares_object_schema(normalized, config):
        properties = normalized.get("properties")
        normalized["additionalProperties"] = False
        normalized["required"] = list(properties) if isinstance(properties, dict) else []

    _rename_combinators(normalized, config, path)

    return normalized


def normalize(schema: SchemaNode, config: NormalizerConfig | None = None) -> SchemaNode:
    """Return a copy of ``schema`` restricted to the OpenAI schema subset.

    The input is never mutated. Scalars and other non-container roots are
    returned unchanged. Raises ``AnyOfConflictError`` only under the
    ``"reject"`` conflict policy, when a renamed ``oneOf``/``allOf`` would
    overwrite an ``anyOf`` that is already present, including one produced
    by renaming ``oneOf`` at the same level.
    """
    return _normalize_node(schema, config or _DEFAULT_CONFIG, "")


def enforce_openai_subset(schema: dict[str, Any], config: NormalizerConfig | None = None) -> dict[str, Any]:
    if not isinstance(schema, dict):
        raise SchemaNormalizationError(f"Expected a JSON object schema, got {type(schema).__name__}")
    return normalize(schema, config)  # type: ignore[return-value]
