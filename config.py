"""
config.py — application settings from environment variables.
All variables use the EXPRCALC_ prefix (e.g. EXPRCALC_LOG_LEVEL=DEBUG).
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    log_level: str = "WARNING"

    # REPL
    prompt: str = ">> "
    history_file: str = ".exprcalc_history"   # empty string disables persistence
    history_length: int = 1000

    # Parser / evaluator
    strict_arity: bool = True     # False: surplus function arguments are ignored
    max_depth: int = Field(default=50, ge=1, le=80)

    # App
    app_title: str = "ExprCalc"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="EXPRCALC_", env_file=".env", extra="ignore")
