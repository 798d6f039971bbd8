"""
Process-scoped service holder.

Built once by create_app() and stored on the Flask app; request handlers
fetch it with get_services(). Initialization order:

    settings -> database schema -> PulseDB client -> cache -> sync service
"""

from dataclasses import dataclass
from typing import Optional

from flask import current_app

from fundpulse.cache import TTLCache
from fundpulse.config import Settings
from fundpulse.pulsedb import PulseDBClient
from fundpulse.sync import SyncService
from fundpulse.webapp.db import init_db

EXTENSION_KEY = 'fundpulse'


@dataclass
class Services:
    settings: Settings
    client: PulseDBClient
    cache: TTLCache
    sync: SyncService

    @property
    def db_path(self):
        return self.settings.database_path


def build_services(settings: Settings, client: Optional[PulseDBClient] = None,
                   cache: Optional[TTLCache] = None) -> Services:
    """Wire up all services for one process."""
    init_db(settings.database_path)

    if client is None:
        client = PulseDBClient.from_settings(settings)
    if cache is None:
        cache = TTLCache(default_ttl=settings.cache_ttl)

    sync = SyncService(client, settings.database_path, settings.target_amcs)
    return Services(settings=settings, client=client, cache=cache, sync=sync)


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
