from dotenv import load_dotenv
from dataclasses import dataclass, fields
from pathlib import Path
import json
import logging
import os

import yaml

from folio.constants import DEFAULT_BASE_URL

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    SITE_BASE_URL = os.getenv("SITE_BASE_URL", DEFAULT_BASE_URL)
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///folio_leads.db")  # Default to SQLite

    # Lead store backend configuration
    DB_BACKEND = os.getenv("DB_BACKEND", "local")  # 'local' or 'turso'
    TURSO_DATABASE_URL = os.getenv("TURSO_DATABASE_URL")  # e.g., libsql://your-db.turso.io
    TURSO_AUTH_TOKEN = os.getenv("TURSO_AUTH_TOKEN")

    OUTPUT_DIR = os.getenv("OUTPUT_DIR", "public")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def load_data_file(path: Path) -> dict:
    """Parse a YAML or JSON file into a dict (.json as JSON, anything else as YAML)."""
    with open(path, 'r') as f:
        if path.suffix.lower() == '.json':
            return json.load(f) or {}
        return yaml.safe_load(f) or {}


@dataclass
class SEOThresholds:
    """Configurable thresholds and weights for page SEO scoring."""

    # Title length (characters, inclusive bounds)
    title_min: int = 30
    title_max: int = 60
    title_short_score: int = 60
    title_long_score: int = 40

    # Meta description length (characters, inclusive bounds)
    description_min: int = 120
    description_max: int = 160
    description_short_score: int = 70
    description_long_score: int = 50

    # Keywords
    max_keywords: int = 10
    no_keywords_score: int = 30
    keywords_in_title_points: int = 50
    keywords_in_description_points: int = 30
    focused_keywords_points: int = 20  # keyword count within max_keywords
    excess_keywords_points: int = 10

    optimal_score: int = 100

    # Overall score weights
    title_weight: float = 0.4
    description_weight: float = 0.3
    keywords_weight: float = 0.3

    @classmethod
    def from_env(cls) -> "SEOThresholds":
        """Load thresholds from environment variables.

        Environment variables should be prefixed with FOLIO_SEO_
        e.g., FOLIO_SEO_TITLE_MAX=65

        Returns:
            SEOThresholds with values from environment
        """
        thresholds = cls()
        prefix = "FOLIO_SEO_"

        for field_name in thresholds.__dataclass_fields__:
            env_key = f"{prefix}{field_name.upper()}"
            env_value = os.getenv(env_key)

            if env_value is not None:
                field_type = thresholds.__dataclass_fields__[field_name].type
                try:
                    if field_type == int:
                        setattr(thresholds, field_name, int(env_value))
                    elif field_type == float:
                        setattr(thresholds, field_name, float(env_value))
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_key}: {env_value!r}")

        return thresholds

    @classmethod
    def from_file(cls, path: str) -> "SEOThresholds":
        """Load thresholds from a YAML or JSON configuration file.

        Args:
            path: Path to configuration file

        Returns:
            SEOThresholds with values from file
        """
        thresholds = cls()
        file_path = Path(path)

        if not file_path.exists():
            return thresholds

        config = load_data_file(file_path)
        threshold_config = config.get('seo', config)

        for field_name in thresholds.__dataclass_fields__:
            if field_name in threshold_config:
                setattr(thresholds, field_name, threshold_config[field_name])

        return thresholds

    def to_dict(self) -> dict:
        """Convert thresholds to dictionary.

        Returns:
            Dictionary of all threshold values
        """
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }


@dataclass(frozen=True)
class BudgetTier:
    """Budget bracket matched by substring against the submitted budget label."""

    markers: tuple[str, ...]
    points: int


@dataclass(frozen=True)
class LeadScoringConfig:
    """Immutable point table for lead scoring.

    Loaded once and shared; project categories and budget markers are
    tuples so the table can't be changed after startup.
    """

    high_value_projects: tuple[str, ...] = (
        "E-commerce Platform",
        "Custom Software",
        "Mobile App Development",
    )
    high_value_points: int = 30
    medium_value_projects: tuple[str, ...] = (
        "Website Development",
        "API Development",
    )
    medium_value_points: int = 20
    default_project_points: int = 10

    # Checked in order, first match wins
    budget_tiers: tuple[BudgetTier, ...] = (
        BudgetTier(markers=("$50,000", "Over"), points=40),
        BudgetTier(markers=("$25,000", "$10,000"), points=30),
        BudgetTier(markers=("$5,000",), points=20),
    )
    default_budget_points: int = 10

    company_points: int = 15
    phone_points: int = 10

    # Messages strictly longer than this earn the bonus
    detailed_message_length: int = 100
    detailed_message_points: int = 5

    max_score: int = 100

    @classmethod
    def from_dict(cls, data: dict) -> "LeadScoringConfig":
        """Build a config from a plain mapping, keeping defaults for missing keys."""
        overrides = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name == 'budget_tiers':
                value = tuple(
                    BudgetTier(markers=tuple(tier['markers']), points=int(tier['points']))
                    for tier in value
                )
            elif isinstance(value, list):
                value = tuple(value)
            overrides[f.name] = value
        return cls(**overrides)

    @classmethod
    def from_file(cls, path: str) -> "LeadScoringConfig":
        """Load a point table from a YAML or JSON file.

        The file may hold the table at the top level or under a
        ``lead_scoring`` key. A missing file yields the defaults.

        Args:
            path: Path to configuration file

        Returns:
            LeadScoringConfig with values from file
        """
        file_path = Path(path)
        if not file_path.exists():
            logger.debug(f"Lead scoring config not found at {path}, using defaults")
            return cls()

        config = load_data_file(file_path)
        return cls.from_dict(config.get('lead_scoring', config))

    def to_dict(self) -> dict:
        """Convert the point table to plain dicts and lists."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == 'budget_tiers':
                value = [
                    {'markers': list(tier.markers), 'points': tier.points}
                    for tier in value
                ]
            elif isinstance(value, tuple):
                value = list(value)
            result[f.name] = value
        return result


# Global defaults
default_thresholds = SEOThresholds()
default_lead_scoring = LeadScoringConfig()
