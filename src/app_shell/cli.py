import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

from src.api.deps import get_settings
from src.app_shell.config import configure_logging, validate_ops_rules
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger("cli")


def get_rules(path: Path) -> Rules:
    try:
        return load_rules(path)
    except (FileNotFoundError, ValueError) as e:
        logging.basicConfig(level=logging.INFO)
        logger.critical("Rules load failed: %s", e)
        sys.exit(1)


def handle_serve(rules: Rules, args: argparse.Namespace) -> None:
    host = args.host or rules.ops.host
    port = args.port or rules.ops.port
    logger.info("Serving envelope API on http://%s:%s", host, port)
    uvicorn.run(
        "src.api.main:create_app",
        factory=True,
        host=host,
        port=port,
        log_level=rules.ops.log_level.lower(),
    )


def handle_check_rules(rules: Rules, args: argparse.Namespace) -> None:
    validate_ops_rules(rules)
    print(f"Rules OK: {rules.project.slug} v{rules.project.rules_version}")
    print(f"  percentage_tolerance: {rules.ledger.percentage_tolerance}")
    print(f"  atomic_distribute:    {rules.ledger.atomic_distribute}")
    print(f"  max_title_length:     {rules.ledger.max_title_length}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Envelope Budget API")
    parser.add_argument("--rules", type=Path, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (default from rules)")
    serve_parser.add_argument("--port", type=int, help="Port (default from rules)")

    # check-rules
    subparsers.add_parser("check-rules", help="Validate the rules file and exit")

    args = parser.parse_args(argv)

    if args.rules:
        # The server factory reads the same setting
        os.environ["ENVELOPE_RULES_PATH"] = str(args.rules)
    rules = get_rules(get_settings().rules_path)
    configure_logging(rules)

    if args.command == "serve":
        handle_serve(rules, args)
    elif args.command == "check-rules":
        handle_check_rules(rules, args)


if __name__ == "__main__":
    main()
