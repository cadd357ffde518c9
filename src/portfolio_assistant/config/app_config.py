# main app settings/configs
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from portfolio_assistant.config.settings_mixins import (
    KnowledgeDBSettingsMixin,
    CompletionSettingsMixin,
    ChatPolicySettingsMixin,
)
from portfolio_assistant.common.logging.logger import logger
from functools import lru_cache

# Determine which environment we're in. Default to 'dev'.
APP_ENV = os.getenv("APP_ENV", "dev")

# Define the path to the .env file relative to this config file's location.
# This file is in src/portfolio_assistant/config/, so we go up three levels to the project root
# NOTE: the .env file names must match the APP_ENV config.
SERVICE_ROOT = Path(__file__).resolve().parents[3]
env_file_path = SERVICE_ROOT / f".env.{APP_ENV}"
logger.info(f"APP_ENV: {APP_ENV}")

class DefaultSettings(BaseSettings):
    """
    The baseline, default settings that govern common functionalities.
    Universal, low-level settings and pydantic config for parsing .env files.
    Passed in last to set low priority (allows overrides)
    """
    model_config = SettingsConfigDict(env_file_encoding="utf-8", extra="ignore")

    # NOTE: this should be set in terminal to flexibly switch between different envs
    APP_ENV: str = os.getenv("APP_ENV", "dev")

class ServiceSettings(
    KnowledgeDBSettingsMixin,
    CompletionSettingsMixin,
    ChatPolicySettingsMixin,
    DefaultSettings # passed in last to set low priority
):
    """
    The main service settings.
    Setting mix-ins are passed in for different services/clients.
    """

    # FastAPI docs settings
    INCLUDE_DOCS: bool = False # by default disable, only enable in dev

    # Health check settings
    HEALTH_CHECK_DB: bool = True

    # default setting with env file path
    model_config = SettingsConfigDict(
        env_file=env_file_path, env_file_encoding="utf-8", extra="ignore"
    )

# use lru cache to return a cached instance of service settings
# NOTE: makes settings accessible from anywhere in the app, without being request-scope
@lru_cache()
def get_service_settings() -> ServiceSettings:
    return ServiceSettings() # type: ignore
