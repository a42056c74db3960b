"""Configuration schema models using Pydantic."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from repricer.document.html import DEFAULT_PARSER, SUPPORTED_PARSERS
from repricer.pricing.exceptions import AdjustmentParseError
from repricer.pricing.models import AdjustmentSpec


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


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for repricer runs.

    Every field can be overridden on the command line; a config file only
    supplies defaults.
    """

    adjustment: Optional[str] = Field(
        None, description="Signed amount (e.g. -2.46) or percentage (e.g. '-14%')"
    )
    limit: Optional[int] = Field(
        None, ge=0, description="Maximum number of matched nodes to adjust (unset = all)"
    )
    selector: Optional[str] = Field(
        None, description="CSS selector of the subtree to scan (unset = whole document)"
    )
    parser: str = Field(DEFAULT_PARSER, description="BeautifulSoup parser for input documents")
    encoding: str = Field("utf-8", min_length=1, description="Input and output file encoding")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @field_validator("adjustment", mode="before")
    @classmethod
    def validate_adjustment(cls, v):
        """Accept YAML numbers or strings; store the canonical string form."""
        if v is None:
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            # format() avoids exponent notation for small floats like 1e-05
            v = format(Decimal(str(v)), "f")
        if not isinstance(v, str):
            raise ValueError(f"adjustment must be a number or string, got {type(v).__name__}")
        try:
            AdjustmentSpec.parse(v)
        except AdjustmentParseError as e:
            raise ValueError(str(e)) from e
        return v.strip()

    @field_validator("selector")
    @classmethod
    def strip_selector(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank selector as unset."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    @field_validator("parser")
    @classmethod
    def validate_parser(cls, v: str) -> str:
        """Restrict to the parsers the document layer supports."""
        if v not in SUPPORTED_PARSERS:
            raise ValueError(
                f"Unsupported parser '{v}'. Must be one of: {', '.join(SUPPORTED_PARSERS)}"
            )
        return v

    def get_adjustment_spec(self) -> Optional[AdjustmentSpec]:
        """Parsed adjustment, or None if the config does not set one."""
        if self.adjustment is None:
            return None
        return AdjustmentSpec.parse(self.adjustment)
