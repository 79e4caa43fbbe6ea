"""
Command-line argument parser configuration.
"""

import argparse


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="schemasupport",
        description="Apply SQL and CSV change files to a PostgreSQL database exactly once",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Apply everything under ./sql/
  schemasupport --db app -u app -p secret

  # Preview what would run, printing each statement
  schemasupport --db app -u app --search ./migrations --dry --verbose-sql

  # Credentials from Vault, JSON logs, metrics pushed to a Pushgateway
  schemasupport --use-vault --log-json --pushgateway pushgateway:9091

Connection settings not given on the command line are read from
POSTGRES_HOST, POSTGRES_PORT, POSTGRES_DB, POSTGRES_USER and POSTGRES_PASSWORD.
        """
    )

    # Connection
    parser.add_argument('-u', '--user', help='User')
    parser.add_argument('-p', '--password', help='Password')
    parser.add_argument('--host', help='Host name (default: localhost)')
    parser.add_argument('--port', type=int, help='TCP port (default: 5432)')
    parser.add_argument('--db', help='Database name')
    parser.add_argument(
        '--sslmode',
        default='prefer',
        help='libpq sslmode (default: prefer)'
    )
    parser.add_argument(
        '--use-vault',
        action='store_true',
        help='Fetch PostgreSQL credentials from HashiCorp Vault'
    )

    # Run
    parser.add_argument(
        '--search',
        default='./sql/',
        help='Search path for change files (default: ./sql/)'
    )
    parser.add_argument(
        '--dry',
        action='store_true',
        help='Dry run mode: plan and validate, write nothing'
    )
    parser.add_argument(
        '--verbose-sql',
        action='store_true',
        help='Print out SQL'
    )
    parser.add_argument(
        '--no-lock',
        action='store_true',
        help='Do not take the advisory lock that serializes concurrent runs'
    )

    # Observability
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='WARNING',
        help='Logging level (default: WARNING)'
    )
    parser.add_argument('--log-json', action='store_true', help='Emit logs as JSON')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument(
        '--pushgateway',
        help='Push run metrics to this Prometheus Pushgateway (host:port)'
    )
    parser.add_argument(
        '--otlp-endpoint',
        help='Export traces to this OTLP collector (host:port)'
    )

    return parser
