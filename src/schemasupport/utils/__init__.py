"""
Ambient utilities for schemasupport

Provides:
- logging: structured/console logging setup
- tracing: OpenTelemetry spans
- metrics: Prometheus run metrics
- retry: backoff for transient connection errors
- vault_client: PostgreSQL credentials from HashiCorp Vault
"""

__all__ = ["logging", "tracing", "metrics", "retry", "vault_client"]
