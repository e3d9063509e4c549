"""Configuration settings for the dashboard."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
import os

from dotenv import load_dotenv


load_dotenv()


DEFAULT_BASE_URL = "https://api.stlouisfed.org/fred"

# History fetched on the initial backfill
DEFAULT_START_DATE = date(2018, 1, 1)

# FRED allows 120 requests per minute
RATE_LIMIT_DELAY = 0.5  # seconds between requests


@dataclass
class Settings:
    """Application settings."""

    fred_api_key: str = field(default_factory=lambda: os.getenv("FRED_API_KEY", ""))
    fred_base_url: str = field(
        default_factory=lambda: os.getenv("FRED_API_BASE_URL", DEFAULT_BASE_URL)
    )
    data_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("MACRO_DATA_DIR", Path(__file__).parent.parent.parent / "data")
        )
    )
    default_start_date: date = DEFAULT_START_DATE
    rate_limit_delay: float = RATE_LIMIT_DELAY
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def validate(self) -> None:
        """Validate required settings."""
        if not self.fred_api_key:
            raise ValueError(
                "FRED_API_KEY not set. Get one at: "
                "https://fred.stlouisfed.org/docs/api/api_key.html"
            )

    def has_api_key(self) -> bool:
        """Check if a FRED API key is configured."""
        return bool(self.fred_api_key)
