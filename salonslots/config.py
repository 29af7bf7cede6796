"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.commissions import CommissionSettings
from .domain.slot_generator import DEFAULT_STEP_MINUTES


class DefaultsConfig(BaseModel):
    """Default settings for availability queries."""
    slot_step_minutes: int = DEFAULT_STEP_MINUTES

    @field_validator("slot_step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Ensure the slot step is a sensible number of minutes."""
        if not 1 <= value <= 240:
            raise ValueError(f"slot_step_minutes must be between 1 and 240, got {value}")
        return value


class StoreConfig(BaseModel):
    """Where booking records are read from."""
    backend: Literal["json", "rest"] = "json"
    data_file: Optional[Path] = None  # bundled sample data when unset
    base_url: str = ""
    api_key: str = ""
    timezone: str = "America/Sao_Paulo"

    @model_validator(mode="after")
    def validate_rest_settings(self) -> "StoreConfig":
        """The REST backend needs both a URL and a key."""
        if self.backend == "rest" and (not self.base_url or not self.api_key):
            raise ValueError("store.base_url and store.api_key are required for the rest backend")
        return self


class CommissionConfig(BaseModel):
    """Commission rules (percentages)."""
    card_fee_credit: float = 3.5
    card_fee_debit: float = 1.5
    default_commission: float = 40.0
    deduct_fees_from_commission: bool = True

    @field_validator("card_fee_credit", "card_fee_debit", "default_commission")
    @classmethod
    def validate_percent(cls, value: float) -> float:
        """Validate percentage is between 0 and 100."""
        if not 0 <= value <= 100:
            raise ValueError(f"Percentage must be between 0 and 100, got {value}")
        return value

    def to_settings(self) -> CommissionSettings:
        """Get the domain-level settings object."""
        return CommissionSettings(
            card_fee_credit=self.card_fee_credit,
            card_fee_debit=self.card_fee_debit,
            default_commission=self.default_commission,
            deduct_fees_from_commission=self.deduct_fees_from_commission,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    commission: CommissionConfig = Field(default_factory=CommissionConfig)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative data files are resolved against the config file location
        data_file = config.store.data_file
        if data_file is not None and not data_file.is_absolute():
            config.store.data_file = config_path.parent / data_file

        return config

    @classmethod
    def load_or_default(cls, config_path: Optional[Path]) -> "AppConfig":
        """
        Load the given config file; without an explicit path, fall back to
        built-in defaults when no config.yaml can be found.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
