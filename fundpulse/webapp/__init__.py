"""Flask web layer: REST API, SQLite store and process services."""
