"""
Rules file loading and schema validation tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from src.rules.loader import load_rules, parse_rules
from src.rules.models import Rules


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def write_rules(tmp_path: Path, rules: dict[str, Any]) -> Path:
    """Write a rules dict to a temporary YAML file."""
    path = tmp_path / "rules.yaml"
    with open(path, "w") as f:
        yaml.dump(rules, f)
    return path


class TestRulesLoading:
    """Test rules file loading."""

    def test_load_project_rules_file(self, project_root: Path) -> None:
        """The shipped rules.yaml loads and keeps the reference tolerance."""
        rules = load_rules(project_root / "rules.yaml")

        assert isinstance(rules, Rules)
        assert rules.project.slug == "envelope-budget-api"
        assert rules.ledger.percentage_tolerance == 0.01
        assert rules.ledger.atomic_distribute is True

    def test_load_nonexistent_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "missing.yaml")

    def test_load_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("invalid: yaml: content: [")

        with pytest.raises(ValueError, match="Invalid YAML syntax"):
            load_rules(path)

    def test_load_from_markdown_fence(self) -> None:
        """Rules wrapped in a ```yaml block are extracted."""
        content = (
            "# Envelope rules\n\n"
            "```yaml\n"
            "project:\n"
            "  slug: fenced\n"
            "  rules_version: '2'\n"
            "```\n"
            "trailing notes\n"
        )

        rules = parse_rules(content)

        assert rules.project.slug == "fenced"


class TestRulesSchemaValidation:
    """Test schema defaults and constraints."""

    def test_minimal_rules_use_defaults(self, tmp_path: Path) -> None:
        path = write_rules(tmp_path, {"project": {"slug": "x", "rules_version": "1"}})

        rules = load_rules(path)

        assert rules.ledger.percentage_tolerance == 0.01
        assert rules.ledger.max_title_length == 200
        assert rules.api.cors_origins == ["*"]
        assert rules.api.cors_methods == ["GET", "POST", "PUT", "DELETE"]
        assert rules.ops.log_level == "INFO"
        assert rules.ops.port == 3000

    def test_missing_project_rejected(self) -> None:
        with pytest.raises(ValueError, match="Rules validation failed"):
            parse_rules("ledger:\n  atomic_distribute: false\n")

    def test_negative_tolerance_rejected(self) -> None:
        with pytest.raises(ValueError, match="Rules validation failed"):
            parse_rules(
                "project: {slug: x, rules_version: '1'}\n"
                "ledger: {percentage_tolerance: -1}\n"
            )

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_rules("project: {slug: x, rules_version: '1'}\nops: {log_level: LOUD}\n")

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ValueError, match="YAML mapping"):
            parse_rules("- just\n- a list\n")
