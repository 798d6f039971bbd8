"""Runtime configuration read from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_TARGET_AMCS = ['HDFC', 'Axis', 'ICICI Prudential', 'Nippon', 'SBI']

# Data directory, overridable with the FUNDPULSE_DATA_DIR env var
DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def _env_bool(name: str, default: bool) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name: str, default: List[str]) -> List[str]:
    val = os.environ.get(name)
    if not val:
        return list(default)
    return [item.strip() for item in val.split(',') if item.strip()]


@dataclass
class Settings:
    """
    Application settings.

    Attributes:
        pulsedb_base_url: Root URL of the PulseDB partner API
        pulsedb_api_key: Partner id sent to partner_login
        pulsedb_api_secret: Partner key sent to partner_login
        database_path: SQLite file holding funds, fund_returns, categories
        target_amcs: AMC names the sync restricts itself to
    """
    pulsedb_base_url: str = ""
    pulsedb_api_key: Optional[str] = None
    pulsedb_api_secret: Optional[str] = None
    database_path: Path = DEFAULT_DATA_DIR / "mfdb.sqlite"
    target_amcs: List[str] = field(default_factory=lambda: list(DEFAULT_TARGET_AMCS))
    cache_ttl: int = 300
    cache_sweep_interval: int = 60
    sync_limit: int = 100
    sync_cron: str = "30 15 * * *"  # 21:00 IST
    request_timeout: int = 30
    enable_scheduler: bool = False
    environment: str = "production"
    port: int = 3001
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def has_credentials(self) -> bool:
        placeholder = {None, '', 'your-api-key'}
        return bool(self.pulsedb_base_url) and self.pulsedb_api_key not in placeholder


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from environment variables, loading .env first."""
    load_dotenv(env_file)

    data_dir = Path(os.environ.get('FUNDPULSE_DATA_DIR', str(DEFAULT_DATA_DIR)))
    database_path = Path(os.environ.get('DATABASE_PATH', str(data_dir / "mfdb.sqlite")))

    return Settings(
        pulsedb_base_url=os.environ.get('PULSEDB_BASE_URL', '').rstrip('/'),
        pulsedb_api_key=os.environ.get('PULSEDB_API_KEY'),
        pulsedb_api_secret=os.environ.get('PULSEDB_API_SECRET'),
        database_path=database_path,
        target_amcs=_env_list('TARGET_AMCS', DEFAULT_TARGET_AMCS),
        cache_ttl=int(os.environ.get('CACHE_TTL_SECONDS', 300)),
        cache_sweep_interval=int(os.environ.get('CACHE_SWEEP_SECONDS', 60)),
        sync_limit=int(os.environ.get('SYNC_LIMIT', 100)),
        sync_cron=os.environ.get('SYNC_CRON', "30 15 * * *"),
        request_timeout=int(os.environ.get('REQUEST_TIMEOUT', 30)),
        enable_scheduler=_env_bool('ENABLE_SCHEDULER', False),
        environment=os.environ.get('APP_ENV', os.environ.get('FLASK_ENV', 'production')),
        port=int(os.environ.get('PORT', 3001)),
        log_level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
    )
