"""CLI management commands.

Usage:
    fundpulse init-db
    fundpulse sync [limit]
    fundpulse sync-categories
    fundpulse seed
    fundpulse serve
"""

import logging
import sys

from fundpulse.config import load_settings
from fundpulse.webapp.db import get_db, seed_sample_data
from fundpulse.webapp.services import build_services

logger = logging.getLogger(__name__)


def cmd_init_db(services, _args):
    print(f"Database ready at {services.db_path}")


def cmd_sync(services, args):
    limit = services.settings.sync_limit
    if args:
        try:
            limit = int(args[0])
        except ValueError:
            print("Usage: sync [limit]")
            sys.exit(1)

    services.sync.sync_categories()
    result = services.sync.sync_funds(limit)
    print(f"Synced {result.synced_count} funds, {result.error_count} errors, {result.duration}s")
    if result.error_count:
        print("Failed: " + ", ".join(result.failed_codes))


def cmd_sync_categories(services, _args):
    added = services.sync.sync_categories()
    print(f"{added} new categories")


def cmd_seed(services, _args):
    """Sync from PulseDB when credentials exist, else load the sample catalog."""
    if services.settings.has_credentials:
        print("Syncing from PulseDB API...")
        try:
            services.sync.sync_categories()
            services.sync.sync_funds(services.settings.sync_limit)
            print("PulseDB sync completed!")
            return
        except Exception as e:
            logger.error(f"PulseDB sync failed: {e}")
            print("Falling back to sample data...")
    else:
        print("No PulseDB credentials, using sample data...")

    with get_db(services.db_path) as conn:
        count = seed_sample_data(conn)
    print(f"Seeded {count} sample funds")


def cmd_serve(services, _args):
    from fundpulse.webapp.routes import create_app

    app = create_app(services=services)
    if services.settings.enable_scheduler:
        from fundpulse.scheduler import start_scheduler
        start_scheduler(services)
    app.run(host='0.0.0.0', port=services.settings.port)


COMMANDS = {
    'init-db': cmd_init_db,
    'sync': cmd_sync,
    'sync-categories': cmd_sync_categories,
    'seed': cmd_seed,
    'serve': cmd_serve,
}


def main():
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        print("Available commands: " + ", ".join(COMMANDS.keys()))
        sys.exit(1)

    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    services = build_services(settings)
    COMMANDS[sys.argv[1]](services, sys.argv[2:])


if __name__ == '__main__':
    main()
