from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

AnyOfConflictPolicy = Literal["merge", "reject", "last_wins"]

DEFAULT_DISALLOWED_KEYWORDS: tuple[str, ...] = (
    "minLength",
    "maxLength",
    "pattern",
    "format",
    "minimum",
    "maximum",
    "multipleOf",
    "patternProperties",
    "unevaluatedProperties",
    "propertyNames",
    "minProperties",
    "maxProperties",
    "unevaluatedItems",
    "contains",
    "minContains",
    "maxContains",
    "minItems",
    "maxItems",
    "uniqueItems",
)

# The normalizer writes these itself, stripping them would undo its own output.
STRUCTURAL_KEYWORDS = frozenset({"properties", "required", "additionalProperties", "anyOf", "type"})


class NormalizerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    disallowed_keywords: tuple[str, ...] = Field(default=DEFAULT_DISALLOWED_KEYWORDS)
    any_of_conflict: AnyOfConflictPolicy = Field(default="merge")
    object_type_implies_object_schema: bool = Field(default=True)
    preserve_property_names: bool = Field(default=False)

    @field_validator("disallowed_keywords")
    @classmethod
    def _check_disallowed_keywords(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        keywords = tuple(dict.fromkeys(keyword.strip() for keyword in value if keyword.strip()))
        structural = sorted(STRUCTURAL_KEYWORDS.intersection(keywords))
        if structural:
            raise ValueError(f"structural keywords cannot be disallowed: {', '.join(structural)}")
        return keywords


def _config_path() -> Path:
    override = os.getenv("OPENAI_SCHEMA_CONFIG")
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[2] / "config" / "normalizer.yml"


def _env_path() -> Path:
    return Path(__file__).resolve().parents[2] / ".env"


def _load_yaml_config() -> dict[str, Any]:
    path = _config_path()
    if not path.exists():
        return {}

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        return raw
    return {}


def _split_keywords(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def get_normalizer_config() -> NormalizerConfig:
    load_dotenv(_env_path(), override=False)

    raw = _load_yaml_config()

    env_keywords = os.getenv("SCHEMA_DISALLOWED_KEYWORDS")
    env_extra_keywords = os.getenv("SCHEMA_EXTRA_DISALLOWED_KEYWORDS")
    env_any_of_conflict = os.getenv("SCHEMA_ANY_OF_CONFLICT")

    if env_keywords is not None:
        raw["disallowed_keywords"] = _split_keywords(env_keywords)
    if env_extra_keywords is not None:
        base = raw.get("disallowed_keywords", DEFAULT_DISALLOWED_KEYWORDS)
        raw["disallowed_keywords"] = [*base, *_split_keywords(env_extra_keywords)]
    if env_any_of_conflict is not None:
        raw["any_of_conflict"] = env_any_of_conflict.strip()

    return NormalizerConfig(**raw)
