from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.memory_ledger import InMemoryLedgerStore
from src.api.main import create_app
from src.rules.loader import parse_rules
from src.rules.models import Rules

TEST_RULES_YAML = """
project:
  slug: envelope-budget-api-test
  rules_version: "test"
ledger:
  percentage_tolerance: 0.01
  atomic_distribute: true
  max_title_length: 200
ops:
  log_level: DEBUG
"""


@pytest.fixture
def rules() -> Rules:
    return parse_rules(TEST_RULES_YAML)


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def app(rules: Rules, store: InMemoryLedgerStore) -> FastAPI:
    """A fresh app, and so a fresh ledger, per test."""
    return create_app(rules=rules, store=store)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
