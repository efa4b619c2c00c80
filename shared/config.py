"""
TDX Export - Configuration
Reads settings from the environment (and an optional .env file)
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from shared.errors import ConfigurationError

DEFAULT_API_URL = "https://api.teamdynamix.com/TDWebApi/api"
DEFAULT_APP_ID = "641"


class AttributeIds(BaseModel):
    """
    Numeric TDX custom attribute IDs.

    Left unset, lookups fall back to the attribute display name.
    """
    num_students: Optional[int] = None
    num_staff: Optional[int] = None
    num_public: Optional[int] = None
    num_others: Optional[int] = None
    tech_coordinator: Optional[int] = None


class Settings(BaseModel):
    """Runtime settings for the export pipeline"""
    api_key: Optional[str] = Field(None, repr=False)
    api_url: str = DEFAULT_API_URL
    app_id: str = DEFAULT_APP_ID
    token_capacity: int = Field(50, gt=0)
    refill_window: float = Field(60.0, gt=0)
    http_timeout: float = 30.0
    attribute_ids: AttributeIds = Field(default_factory=AttributeIds)

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """Build settings from TDX_* environment variables"""
        if load_env_file:
            load_dotenv()

        return cls(
            api_key=os.getenv("TDX_KEY") or None,
            api_url=os.getenv("TDX_API_URL", DEFAULT_API_URL),
            app_id=os.getenv("TDX_APP_ID", DEFAULT_APP_ID),
            token_capacity=_env_number("TDX_TOKEN_CAPACITY", 50, int),
            refill_window=_env_number("TDX_REFILL_WINDOW", 60.0, float),
            http_timeout=_env_number("TDX_HTTP_TIMEOUT", 30.0, float),
            attribute_ids=AttributeIds(
                num_students=_env_number("TDX_ATTR_NUM_STUDENTS", None, int),
                num_staff=_env_number("TDX_ATTR_NUM_STAFF", None, int),
                num_public=_env_number("TDX_ATTR_NUM_PUBLIC", None, int),
                num_others=_env_number("TDX_ATTR_NUM_OTHERS", None, int),
                tech_coordinator=_env_number("TDX_ATTR_TECH_COORDINATOR", None, int),
            ),
        )


def _env_number(key: str, default, cast):
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return cast(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {value!r}")
