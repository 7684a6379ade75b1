import logging
import os
import sys

from src.components.envelopes import LedgerConfig
from src.rules.models import Rules

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(rules: Rules) -> None:
    """Set the root log level from ops rules."""
    logging.basicConfig(level=rules.ops.log_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(rules.ops.log_level)


def ledger_config_from_rules(rules: Rules) -> LedgerConfig:
    """Map ledger rules onto the envelopes component config."""
    return LedgerConfig(
        percentage_tolerance=rules.ledger.percentage_tolerance,
        atomic_distribute=rules.ledger.atomic_distribute,
        max_title_length=rules.ledger.max_title_length,
    )


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.
    """
    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]

    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    if not rules.ledger.atomic_distribute:
        logger.warning(
            "ledger.atomic_distribute is off: a distribution that hits an unknown "
            "envelope keeps the shares already applied"
        )

    logger.info("Configuration validated (rules %s)", rules.project.rules_version)
