"""
Configuration
==============
Gameplay constants plus environment-driven settings for the Oracle
client, the Oracle proxy and logging.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


# =============================================================================
# ARENA & GAMEPLAY
# =============================================================================

ARENA_WIDTH = 800
ARENA_HEIGHT = 600

PLAYER_SIZE = 30
ENEMY_SIZE = 25
TREASURE_SIZE = 20
VILLAGER_SIZE = 25

PLAYER_SPEED = 3
PLAYER_MAX_HEALTH = 100
CONTACT_DAMAGE = 1
TALK_DISTANCE = 60

NORMAL_POINTS = 10
SPECIAL_POINTS = 50
SPECIAL_CHANCE = 0.3

PARTICLES_PER_PICKUP = 5
PARTICLE_LIFE = 30
PARTICLE_SPEED = 2.0

NARRATIVE_CHANCE = 0.3

TICK_INTERVAL = 0.016  # seconds, ~60 updates per second
MAX_TICKS_PER_STEP = 4


# =============================================================================
# ENVIRONMENT SETTINGS
# =============================================================================

DEFAULT_TOGETHER_URL = 'https://api.together.xyz/v1/chat/completions'
DEFAULT_ORACLE_MODEL = 'meta-llama/Llama-3.3-70B-Instruct-Turbo-Free'
DEFAULT_CHAT_MODEL = 'meta-llama/Llama-3.2-11B-Vision-Instruct-Turbo'


class ConfigError(ValueError):
    """Raised when an environment setting cannot be parsed."""


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f'{name} must be a number, got {raw!r}')


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f'{name} must be an integer, got {raw!r}')


@dataclass
class Settings:
    together_api_key: str = ''
    together_url: str = DEFAULT_TOGETHER_URL
    oracle_model: str = DEFAULT_ORACLE_MODEL
    chat_model: str = DEFAULT_CHAT_MODEL
    oracle_url: str = 'http://127.0.0.1:5000/api/ai-oracle'
    oracle_timeout: float = 10.0
    oracle_host: str = '127.0.0.1'
    oracle_port: int = 5000
    log_file: str = 'mystic_quest.log'
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from the process environment (and a .env file, if any)."""
        load_dotenv()
        defaults = cls()
        return cls(
            together_api_key=os.environ.get('TOGETHER_API_KEY', ''),
            together_url=os.environ.get('TOGETHER_API_URL', defaults.together_url),
            oracle_model=os.environ.get('ORACLE_MODEL', defaults.oracle_model),
            chat_model=os.environ.get('CHAT_MODEL', defaults.chat_model),
            oracle_url=os.environ.get('ORACLE_URL', defaults.oracle_url),
            oracle_timeout=_env_float('ORACLE_TIMEOUT', defaults.oracle_timeout),
            oracle_host=os.environ.get('ORACLE_HOST', defaults.oracle_host),
            oracle_port=_env_int('ORACLE_PORT', defaults.oracle_port),
            log_file=os.environ.get('MYSTIC_QUEST_LOG', defaults.log_file),
            log_level=os.environ.get('MYSTIC_QUEST_LOG_LEVEL', defaults.log_level).upper(),
        )


def configure_logging(settings: Settings, to_file: bool = True) -> None:
    """
    Set up root logging.

    The game owns the terminal, so it logs to a file; the proxy logs to stderr.
    """
    level = getattr(logging, settings.log_level, logging.INFO)
    fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    if to_file:
        logging.basicConfig(level=level, format=fmt, filename=settings.log_file)
    else:
        logging.basicConfig(level=level, format=fmt)
