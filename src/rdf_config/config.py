from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional


class SPARQLSettings(BaseSettings):
    """SPARQL generation configuration"""
    query_name: str = Field(default="sparql", description="Query definition to compile")
    limit: Optional[int] = Field(default=100, description="LIMIT of the generated query")
    offset: Optional[int] = Field(default=None, description="OFFSET of the generated query")
    template: bool = Field(
        default=False,
        description="Emit {{name}} placeholders in VALUES lines"
    )

    model_config = SettingsConfigDict(
        env_prefix='SPARQL_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )


class AppSettings(BaseSettings):
    """Application settings"""
    config_dir: str = Field(
        default="config",
        description="Directory holding model.yaml, prefix.yaml and sparql.yaml"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Component settings
    sparql: SPARQLSettings = Field(default_factory=SPARQLSettings)

    model_config = SettingsConfigDict(
        env_prefix='RDF_CONFIG_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )


# Singleton instance
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get application settings (singleton)"""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings
