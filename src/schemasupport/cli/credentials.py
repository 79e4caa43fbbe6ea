"""
Connection settings from command-line arguments, environment or Vault.
"""

import argparse
import logging
import os

from schemasupport.utils.vault_client import VaultClient

logger = logging.getLogger(__name__)


class CredentialsError(Exception):
    """Raised when connection settings are incomplete or unavailable"""


def get_connection_config(args: argparse.Namespace) -> dict:
    """
    Resolve PostgreSQL connection settings

    Command-line values win over Vault, which wins over POSTGRES_*
    environment variables.

    Returns:
        Dictionary of psycopg2.connect() keyword arguments

    Raises:
        CredentialsError: If Vault cannot be reached or no database is named
    """
    vault = {}
    if args.use_vault:
        try:
            creds = VaultClient().get_postgres_credentials()
        except Exception as e:
            raise CredentialsError(f"Failed to fetch credentials from Vault: {e}") from e
        vault = {
            "host": creds["host"],
            "port": creds.get("port", 5432),
            "dbname": creds["database"],
            "user": creds["username"],
            "password": creds["password"],
        }
        logger.info("Using PostgreSQL credentials from Vault")

    config = {
        "host": args.host or vault.get("host") or os.getenv("POSTGRES_HOST", "localhost"),
        "port": int(args.port or vault.get("port") or os.getenv("POSTGRES_PORT", "5432")),
        "dbname": args.db or vault.get("dbname") or os.getenv("POSTGRES_DB"),
        "user": args.user or vault.get("user") or os.getenv("POSTGRES_USER"),
        "password": args.password or vault.get("password") or os.getenv("POSTGRES_PASSWORD"),
        "sslmode": args.sslmode,
    }

    if not config["dbname"]:
        raise CredentialsError("Database name not provided (use --db or POSTGRES_DB)")

    # Let libpq fall back to its own defaults (PGUSER, .pgpass, peer auth)
    return {key: value for key, value in config.items() if value not in (None, "")}
