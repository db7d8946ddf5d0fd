"""Validated construction options for the built-in node kinds.

Option models are frozen pydantic models.  Invalid options surface as
``ConfigurationError`` at graph-assembly time, never mid-traversal.
"""

from __future__ import annotations

import string
from typing import Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from switchyard.core.node import ConfigurationError

WRITE_METHODS = frozenset({"POST", "PUT", "PATCH"})
SUPPORTED_METHODS = WRITE_METHODS | {"GET", "DELETE", "HEAD", "OPTIONS"}

OptionsT = TypeVar("OptionsT", bound=BaseModel)


def build_options(model_cls: type[OptionsT], **values: Any) -> OptionsT:
    """Validate *values* against *model_cls*, raising ``ConfigurationError``."""
    try:
        return model_cls.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid {model_cls.__name__}: {exc}"
        ) from exc


class VariableOptions(BaseModel):
    """Options for nodes that read or write ``message.vars``."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)


class DelayOptions(BaseModel):
    """Options for the fixed-delay node."""

    model_config = ConfigDict(frozen=True)

    seconds: float = Field(ge=0)


class CallOptions(BaseModel):
    """Options for the outbound invocation node.

    ``url`` may contain ``{name}`` placeholders, each of which must be
    supplied by ``path_arguments``.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    method: str = "GET"
    path_arguments: dict[str, Any] = {}
    request_timeout: float = Field(gt=0)
    response_timeout: float = Field(gt=0)

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        method = value.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {value!r}")
        return method

    @model_validator(mode="after")
    def _check_placeholders(self) -> CallOptions:
        placeholders = {
            field
            for _, field, _, _ in string.Formatter().parse(self.url)
            if field
        }
        missing = placeholders - set(self.path_arguments)
        if missing:
            raise ValueError(
                f"URL placeholders without path arguments: {sorted(missing)}"
            )
        return self

    @property
    def sends_body(self) -> bool:
        return self.method in WRITE_METHODS
