"""Pydantic configuration models for neosession."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

SUPPORTED_URI_SCHEMES = (
    "bolt://",
    "bolt+s://",
    "bolt+ssc://",
    "neo4j://",
    "neo4j+s://",
    "neo4j+ssc://",
)


class Neo4jConfig(BaseModel):
    """Neo4j connection and session configuration."""

    uri: str = "bolt://localhost:7687"
    username: str | None = "neo4j"
    password: str = "neo4j"
    database: str | None = None
    max_connection_pool_size: int = Field(default=100, ge=1, le=500)
    connection_timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)
    user_agent: str | None = None
    verify_connectivity: bool = True
    configurators: list[str] = Field(default_factory=list)

    @field_validator("uri")
    @classmethod
    def validate_neo4j_uri(cls, v: str) -> str:
        """Validate Neo4j URI scheme."""
        if not v.startswith(SUPPORTED_URI_SCHEMES):
            raise ValueError(f"uri must start with one of: {', '.join(SUPPORTED_URI_SCHEMES)}")
        return v

    @field_validator("configurators")
    @classmethod
    def validate_configurator_refs(cls, v: list[str]) -> list[str]:
        """Require ``module:attribute`` references."""
        for ref in v:
            module, sep, attr = ref.partition(":")
            if not sep or not module or not attr:
                raise ValueError(f"configurator reference must be 'module:attribute': {ref!r}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration for loguru."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["console", "json"] = "console"
    driver_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: Path | None = None
    rotation: str = "10 MB"
    retention: str = "7 days"


class Config(BaseSettings):
    """Root configuration for neosession."""

    neo4j: Neo4jConfig = Field(default_factory=Neo4jConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "NEOSESSION_",
        "env_nested_delimiter": "__",
    }
