from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

from .errors import ConfigurationError


class DelimiterConfig(BaseModel):
    """Markers that open and close embedded expressions.

    The primary pair marks plain expressions. The secondary pair marks
    expressions whose pending (future) values are resolved while rendering.
    Overlapping delimiters are not detected; scanning behavior with them is
    undefined.
    """
    primary_start: str = Field(default="{{", description="Start of an expression")
    primary_end: str = Field(default="}}", description="End of an expression")
    secondary_start: str = Field(default="{||", description="Start of an expression resolving pending values")
    secondary_end: str = Field(default="||}", description="End of an expression resolving pending values")

    _frozen: bool = PrivateAttr(default=False)

    @field_validator("primary_start", "primary_end", "secondary_start", "secondary_end")
    @classmethod
    def _validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("delimiters must not be empty")
        return v

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """End the setup phase; later setter calls with a value raise."""
        self._frozen = True

    def get_primary_start(self) -> str:
        return self.primary_start

    def get_primary_end(self) -> str:
        return self.primary_end

    def get_secondary_start(self) -> str:
        return self.secondary_start

    def get_secondary_end(self) -> str:
        return self.secondary_end

    def set_primary_start(self, value: str | None) -> str:
        return self._set("primary_start", value)

    def set_primary_end(self, value: str | None) -> str:
        return self._set("primary_end", value)

    def set_secondary_start(self, value: str | None) -> str:
        return self._set("secondary_start", value)

    def set_secondary_end(self, value: str | None) -> str:
        return self._set("secondary_end", value)

    def _set(self, name: str, value: str | None) -> str:
        # An empty value leaves the delimiter untouched
        if not value:
            return getattr(self, name)
        if self._frozen:
            raise ConfigurationError(f"Cannot change '{name}' after templates have been compiled")
        setattr(self, name, value)
        return value


class ExpressionConfig(BaseModel):
    """Defaults for the expression engine."""
    strict_undefined: bool = Field(default=False, description="Raise on missing names instead of rendering ''")
    resolve_async: bool = Field(default=False, description="Resolve pending values in primary expressions too")
    log_warnings: bool = Field(default=True, description="Log when a pending value gets resolved")


class TrustConfig(BaseModel):
    resource_url_allowlist: list[str] = Field(
        default_factory=lambda: ["self"],
        description="'self' for relative URLs, otherwise glob patterns of allowed resource URLs",
    )


class StencilConfig(BaseModel):
    """Top-level configuration for an interpolator, usually loaded from YAML."""
    description: str | None = Field(default=None, description="Optional description of this configuration")
    delimiters: DelimiterConfig = Field(default_factory=DelimiterConfig)
    expressions: ExpressionConfig = Field(default_factory=ExpressionConfig)
    trust: TrustConfig = Field(default_factory=TrustConfig)


def load_config(path: str | Path) -> StencilConfig:
    """Load YAML config from 'path' and validate into a StencilConfig model."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    try:
        return StencilConfig.model_validate(data)
    except ValidationError as e:
        # Re-raise with a cleaner message for CLI users
        raise ValueError(str(e))

