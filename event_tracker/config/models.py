"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List

from apscheduler.triggers.cron import CronTrigger
from pydantic import BaseModel, Field, field_validator

DEFAULT_QUERIES = [
    "AI ML hackathon {region} {year}",
    "GenAI LLM meetup {alias} upcoming",
    "machine learning workshop {region}",
    "AI conference {alias} {year}",
    "data science hackathon {region} devfolio unstop",
]

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class RegionConfig(BaseModel):
    """The area and subject the scan looks for events in."""

    name: str = Field("Bangalore", min_length=1, description="Region name, default venue")
    aliases: List[str] = Field(
        default_factory=lambda: ["Bengaluru"],
        description="Alternative spellings accepted by the extractor",
    )
    topic: str = Field("AI/ML", min_length=1, description="Subject of the events")

    @field_validator("name", "topic")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("aliases")
    @classmethod
    def clean_aliases(cls, v: List[str]) -> List[str]:
        return [alias.strip() for alias in v if alias and alias.strip()]

    @property
    def primary_alias(self) -> str:
        """First alias, or the region name when no alias is configured."""
        return self.aliases[0] if self.aliases else self.name

    @property
    def all_names(self) -> List[str]:
        return [self.name, *self.aliases]


class LLMConfig(BaseModel):
    """Language-model API settings used by the search and extraction calls."""

    api_url: str = Field(ANTHROPIC_MESSAGES_URL, min_length=1)
    api_version: str = Field("2023-06-01", min_length=1)
    model: str = Field("claude-sonnet-4-20250514", min_length=1)
    search_max_tokens: int = Field(1000, ge=1, le=8192)
    extract_max_tokens: int = Field(1000, ge=1, le=8192)
    request_timeout: int = Field(
        120, ge=5, le=600, description="Timeout per API call in seconds"
    )
    user_agent: str = Field("EventTracker/1.0", min_length=1)


class ScheduleConfig(BaseModel):
    """When the automatic daily scan runs."""

    enabled: bool = Field(True, description="Register the daily scan job")
    cron: str = Field("30 2 * * *", description="Crontab expression (5 fields)")
    timezone: str = Field("UTC", min_length=1)

    @field_validator("cron")
    @classmethod
    def validate_cron(cls, v: str) -> str:
        expression = " ".join(v.split())
        try:
            CronTrigger.from_crontab(expression)
        except ValueError as e:
            raise ValueError(f"Invalid cron expression '{v}': {e}") from e
        return expression


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field("0.0.0.0", min_length=1)
    port: int = Field(3000, ge=1, le=65535)
    static_dir: str = Field("public", description="Directory served at /")


class StorageConfig(BaseModel):
    """Location of the flat data files."""

    data_dir: str = Field("data", min_length=1)
    events_file: str = Field("events.json", min_length=1)
    meta_file: str = Field("meta.json", min_length=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the event tracker."""

    region: RegionConfig = Field(default_factory=RegionConfig)
    queries: List[str] = Field(
        default_factory=lambda: list(DEFAULT_QUERIES),
        min_length=1,
        description="Search query templates; {year}, {region}, {alias}, {topic} are substituted",
    )
    llm: LLMConfig = Field(default_factory=LLMConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("queries")
    @classmethod
    def validate_queries(cls, v: List[str]) -> List[str]:
        templates = []
        for template in v:
            stripped = template.strip()
            if not stripped:
                raise ValueError("Query templates cannot be empty")
            try:
                stripped.format(year=2000, region="", alias="", topic="")
            except (KeyError, IndexError, ValueError) as e:
                raise ValueError(
                    f"Invalid placeholder in query '{template}': {e}. "
                    "Supported: {year}, {region}, {alias}, {topic}"
                ) from e
            templates.append(stripped)
        return templates

    def render_queries(self, year: int) -> List[str]:
        """Substitute placeholders in every query template."""
        return [
            template.format(
                year=year,
                region=self.region.name,
                alias=self.region.primary_alias,
                topic=self.region.topic,
            )
            for template in self.queries
        ]
