"""Pydantic settings for the lending risk engine."""

import logging
from decimal import Decimal
from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from lendingrisk.core.constants import (
    BORROW_SAFETY_MARGIN,
    DANGEROUS_HEALTH_FACTOR,
    DEFAULT_DECIMAL_PRECISION,
    THRESHOLD_PRECISION_PLACES,
    USD_PRECISION_PLACES,
    WITHDRAW_SAFETY_MARGIN,
    WITHDRAW_THRESHOLD_PADDING,
)
from lendingrisk.core.parameters import RiskParameters
from lendingrisk.protocols.aave.assets import STABLE_ASSET_SYMBOLS

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Decimal arithmetic
    decimal_precision: int = Field(
        default=DEFAULT_DECIMAL_PRECISION, ge=28, le=200, description="Significant digits for engine math"
    )
    threshold_precision_places: int = Field(
        default=THRESHOLD_PRECISION_PLACES, ge=0, le=18, description="Digits kept for projected liquidation thresholds"
    )
    usd_precision_places: int = Field(default=USD_PRECISION_PLACES, ge=0, le=8, description="Digits kept for USD values")

    # Settlement tolerance margins
    borrow_safety_margin: Decimal = Field(
        default=BORROW_SAFETY_MARGIN, gt=0, le=1, description="Borrow headroom multiplier for users with debt"
    )
    withdraw_threshold_padding: Decimal = Field(
        default=WITHDRAW_THRESHOLD_PADDING, ge=0, le=1, description="Added to the threshold for withdraw headroom"
    )
    withdraw_safety_margin: Decimal = Field(
        default=WITHDRAW_SAFETY_MARGIN, gt=0, le=1, description="Withdraw headroom multiplier"
    )

    # Risk bands
    dangerous_health_factor: Decimal = Field(
        default=DANGEROUS_HEALTH_FACTOR, ge=1, le=10, description="Health factor warning threshold"
    )

    # Asset classification
    stable_asset_symbols: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(STABLE_ASSET_SYMBOLS),
        description="Symbols borrowable in isolation mode",
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Root log level")

    @field_validator("stable_asset_symbols", mode="before")
    @classmethod
    def parse_stable_asset_symbols(cls, v):
        """Parse comma-separated symbols."""
        if isinstance(v, str):
            if not v.strip():
                return []
            return [symbol.strip().upper() for symbol in v.split(",") if symbol.strip()]
        return v or []

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        """Normalize and validate the log level name."""
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def risk_parameters(self) -> RiskParameters:
        """Build the engine parameter set from these settings."""
        return RiskParameters(
            decimal_precision=self.decimal_precision,
            borrow_safety_margin=self.borrow_safety_margin,
            withdraw_threshold_padding=self.withdraw_threshold_padding,
            withdraw_safety_margin=self.withdraw_safety_margin,
            dangerous_health_factor=self.dangerous_health_factor,
            threshold_precision_places=self.threshold_precision_places,
            usd_precision_places=self.usd_precision_places,
        )

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the root logger."""
        logging.basicConfig(level=self.log_level)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
