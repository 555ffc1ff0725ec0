"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    LOG_LEVEL: str = "INFO"
    SOLVER_LOG_LEVEL: Optional[str] = None

    # ======================
    # Timezone
    # ======================
    TIMEZONE: str = "Asia/Kolkata"

    # ======================
    # XIRR solver
    # ======================
    XIRR_INITIAL_GUESS: float = 0.1
    XIRR_TOLERANCE: float = 1e-7
    XIRR_MAX_ITERATIONS: int = 100
    XIRR_BISECTION_LOWER: float = -0.9999
    XIRR_BISECTION_UPPER: float = 10.0
    XIRR_BISECTION_STEPS: int = 100
    XIRR_RATE_FLOOR: float = -0.999999
    XIRR_DAY_COUNT_BASIS: float = 365.0

    # ======================
    # Positions & display
    # ======================
    POSITION_EPSILON: float = 1e-9
    DISPLAY_DECIMALS: int = 2

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
