# config.py
"""
Server configuration settings.
Static game constants live at module level; deployment values are read
from the environment (or a .env file) through the Settings class.
"""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

HOST = "0.0.0.0"  # Listen on all available network interfaces
PORT = 3000       # Slack posts webhooks here
ENCODING = "utf-8"

# --- Permissions ---
WIZARD_LEVEL = 50  # Players at or above this level may edit the world
WIZARDS_FILE = "wizards.txt"  # One Slack user id per line, '#' for comments

# --- Slack Request Signing ---
SIGNATURE_VERSION = "v0"
SIGNATURE_MAX_SKEW_SECONDS = 300  # Reject requests older than five minutes

# --- World ---
DEFAULT_ROOM_DESCRIPTION = "A mysterious room in the Slack workspace."
VIRTUAL_ROOM_PREFIX = "vnum_"

# --- Database Pool ---
DB_POOL_MIN_SIZE = 1
DB_POOL_MAX_SIZE = 10

# --- Outbound Slack API ---
SLACK_API_BASE_URL = "https://slack.com/api"
SLACK_API_TIMEOUT_SECONDS = 10.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "slackmud"
    db_password: str = ""
    db_name: str = "slackmud"

    slack_signing_secret: str = ""
    slack_bot_token: str = ""

    host: str = HOST
    port: int = PORT

    # Comma separated Slack user ids; falls back to WIZARDS_FILE when empty
    wizards: str = ""
    wizards_file: str = WIZARDS_FILE

    def dsn(self) -> str:
        if self.database_url:
            return self.database_url
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    def wizard_ids(self) -> List[str]:
        """Returns the configured wizard allow-list, env var first, then file."""
        if self.wizards.strip():
            return [w.strip() for w in self.wizards.split(",") if w.strip()]
        try:
            with open(self.wizards_file, encoding=ENCODING) as f:
                return [
                    line.strip() for line in f
                    if line.strip() and not line.strip().startswith("#")
                ]
        except FileNotFoundError:
            return []


settings = Settings()
