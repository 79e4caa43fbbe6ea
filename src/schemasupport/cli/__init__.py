"""
Command-line interface for schemasupport.

Parses arguments, sets up logging and tracing, and applies the change files
under the search path to the configured database.
"""

import sys

from schemasupport.utils.logging import setup_logging, shutdown_logging
from schemasupport.utils.tracing import initialize_tracing, shutdown_tracing

from .commands import cmd_run, connect, format_duration, summary_line, truncate_duration
from .credentials import CredentialsError, get_connection_config
from .parser import create_parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the schemasupport CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file, json_format=args.log_json)

    if args.otlp_endpoint:
        initialize_tracing(otlp_endpoint=args.otlp_endpoint)

    try:
        status = cmd_run(args)
    finally:
        shutdown_tracing()
        shutdown_logging()

    sys.exit(status)


__all__ = [
    'main',
    'cmd_run',
    'connect',
    'create_parser',
    'get_connection_config',
    'CredentialsError',
    'format_duration',
    'summary_line',
    'truncate_duration',
]


if __name__ == '__main__':
    main()
