import os
from functools import lru_cache
from pathlib import Path

from fastapi import Request

from src.components.envelopes import EnvelopeLedger


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(
            os.environ.get("ENVELOPE_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- App-scoped state ---
# One ledger per application instance, created in create_app().


def get_ledger(request: Request) -> EnvelopeLedger:
    """Get the envelope ledger for this app."""
    ledger: EnvelopeLedger = request.app.state.ledger
    return ledger
