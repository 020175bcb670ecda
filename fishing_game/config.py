from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    """Application configuration settings."""
    # Logging
    LOG_DEBUG: bool = False

    # Fishing session timing (seconds)
    BITE_DELAY_MIN: float = 2.0
    BITE_DELAY_MAX: float = 3.0
    PERFECT_WINDOW: float = Field(0.3, ge=0)
    TOTAL_WINDOW: float = Field(1.5, gt=0)

    # Catch yield
    PERFECT_MULTIPLIER: float = 1.2
    YIELD_VARIANCE_MIN: float = 0.8
    YIELD_VARIANCE_MAX: float = 1.2
    PRESTIGE_POINTS_BASE: int = 5

    # Day clock (in-game minutes since midnight)
    TIME_SCALE: float = Field(10.0, gt=0) # in-game minutes per real second
    DAY_START_MINUTES: float = 480.0 # 08:00
    DAY_END_MINUTES: float = 1200.0 # 20:00
    MAX_DAYS: int = Field(7, ge=1)

    # Debt and rewards
    BASE_DEBT: int = 10000
    INTEREST_RATE: float = Field(1.05, ge=1.0)
    POINTS_INTEREST_RATE: float = 0.25
    VICTORY_BONUS_START: int = 250
    PRESTIGE_DEBT_MULTIPLIER: int = 10

    # Shop upgrades
    UPGRADE_MULTIPLIER: float = 1.5

    # Stats persistence: "json" or "mongo"
    STATS_BACKEND: str = 'json'
    SAVE_DIR: str = 'saves'
    SAVE_FILE: str = 'player_stats.json'

    # Flask settings
    FLASK_SECRET_KEY: str = Field(...)
    FLASK_DEBUG: bool = False
    TICK_INTERVAL: float = Field(0.05, gt=0) # seconds between host ticks

    # MongoDB settings - Load components individually
    MONGO_HOST: str = "localhost"
    MONGO_PORT: int = 27017
    MONGO_USER: str | None = None # Optional user
    MONGO_PASSWORD: str | None = None # Optional password
    MONGO_DB_NAME: str = 'fishing_game'

    # Construct the URI from components
    @property
    def MONGO_URI(self) -> str:
        auth_source_db = "admin" # Common auth source for admin user
        if self.MONGO_USER and self.MONGO_PASSWORD:
            return f"mongodb://{self.MONGO_USER}:{self.MONGO_PASSWORD}@{self.MONGO_HOST}:{self.MONGO_PORT}/?authSource={auth_source_db}"
        else:
            # No auth needed if no user/pass
            return f"mongodb://{self.MONGO_HOST}:{self.MONGO_PORT}/"

    # Load from .env file if present
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

# Create a single instance of settings to be imported elsewhere
settings = Settings()
