from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Settings models map YAML sections to typed structures.

DEFAULT_PROPERTY_SOURCES = (
    "test.properties",
    "pom.properties",
    "app.properties",
    "context-store.properties",
)


class BootstrapSettings(BaseModel):
    # Default sources are merged in order; later names win on key collision.
    model_config = ConfigDict(extra="forbid")
    enabled: bool = True
    strict: bool = False
    sources: list[str] = Field(default_factory=lambda: list(DEFAULT_PROPERTY_SOURCES))


class PropertiesSettings(BaseModel):
    # Relative search paths resolve against the working directory at load time.
    model_config = ConfigDict(extra="forbid")
    search_paths: list[str] = Field(default_factory=lambda: [".", "resources"])
    encoding: str = "latin-1"


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")
    sink: Literal["none", "stdout", "jsonl", "memory"] = "none"
    path: str | None = None
    level: Literal["debug", "info", "warning", "error"] = "info"

    @model_validator(mode="after")
    def _require_jsonl_path(self) -> "LoggingSettings":
        if self.sink == "jsonl" and not self.path:
            raise ValueError("logging.path is required when logging.sink is jsonl")
        return self


class StoreSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")
    bootstrap: BootstrapSettings = Field(default_factory=BootstrapSettings)
    properties: PropertiesSettings = Field(default_factory=PropertiesSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
