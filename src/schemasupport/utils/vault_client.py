"""
HashiCorp Vault client for fetching PostgreSQL credentials

Reads a KV v2 secret holding host, port, database, username and password.
"""

import logging
import os
import re
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_SECRET_PATH = "secret/database/postgresql"
SAFE_PATH_PATTERN = re.compile(r"^[a-zA-Z0-9/_-]+$")
REQUIRED_FIELDS = ("host", "database", "username", "password")


class VaultClient:
    """
    Minimal Vault KV v2 client

    Address and token default to the VAULT_ADDR and VAULT_TOKEN environment
    variables.
    """

    def __init__(
        self,
        vault_addr: str | None = None,
        vault_token: str | None = None,
        namespace: str | None = None,
        timeout: float = 10.0,
    ):
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        self.vault_token = vault_token or os.getenv("VAULT_TOKEN")
        self.namespace = namespace
        self.timeout = timeout

        if not self.vault_addr:
            raise ValueError(
                "Vault address not provided. Set VAULT_ADDR environment variable "
                "or pass vault_addr parameter."
            )

        if not self.vault_token:
            raise ValueError(
                "Vault token not provided. Set VAULT_TOKEN environment variable "
                "or pass vault_token parameter."
            )

        self.vault_addr = self.vault_addr.rstrip("/")

        self.headers = {
            "X-Vault-Token": self.vault_token,
            "Content-Type": "application/json",
        }
        if self.namespace:
            self.headers["X-Vault-Namespace"] = self.namespace

        logger.debug(f"Initialized Vault client for {self.vault_addr}")

    @staticmethod
    def _kv2_path(secret_path: str) -> str:
        if not secret_path or not isinstance(secret_path, str):
            raise ValueError("secret_path must be a non-empty string")

        if ".." in secret_path or secret_path.startswith("//"):
            raise ValueError(
                f"Invalid secret_path: {secret_path}. "
                "Path traversal attempts are not allowed."
            )

        if not SAFE_PATH_PATTERN.match(secret_path):
            raise ValueError(
                f"Invalid secret_path: {secret_path}. "
                "Only alphanumeric characters, slashes, underscores, and hyphens are allowed."
            )

        if "/data/" in secret_path:
            return secret_path

        # KV v2 reads go through <mount>/data/<path>
        mount, _, rest = secret_path.partition("/")
        return f"{mount}/data/{rest}" if rest else f"{mount}/data"

    def get_secret(self, secret_path: str) -> dict[str, Any]:
        """
        Fetch secret data from Vault KV v2

        Raises:
            ValueError: If the path is invalid or the secret is missing/empty
            requests.RequestException: If the Vault request fails
        """
        path = self._kv2_path(secret_path)
        url = f"{self.vault_addr}/v1/{path}"

        logger.debug(f"Fetching secret from: {url}")

        response = requests.get(url, headers=self.headers, timeout=self.timeout)

        if response.status_code == 404:
            raise ValueError(f"Secret not found at path: {path}")

        response.raise_for_status()

        secret_data = response.json().get("data", {}).get("data", {})
        if not secret_data:
            raise ValueError(f"No data found in secret at path: {path}")

        return secret_data

    def get_postgres_credentials(self, secret_path: str = DEFAULT_SECRET_PATH) -> dict[str, Any]:
        """
        Fetch PostgreSQL credentials

        Returns:
            Dictionary with host, port, database, username and password;
            port defaults to 5432
        """
        secret_data = dict(self.get_secret(secret_path))

        missing_fields = [f for f in REQUIRED_FIELDS if f not in secret_data]
        if missing_fields:
            raise ValueError(
                f"Missing required fields in secret: {', '.join(missing_fields)}"
            )

        secret_data.setdefault("port", 5432)

        logger.info("Fetched PostgreSQL credentials from Vault")
        return secret_data
