"""
Rule and Profile loader.

Loads rules and profiles from YAML files.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from .models import Check, Profile, ProfileOverrides, Rule, Severity

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def load_rules_from_yaml(path: Path) -> list[Rule]:
    """
    Load rules from a YAML file.

    YAML format:
    ```yaml
    rules:
      INI-KEY-001:
        version: "1.0.0"
        title: "Duplicate key"
        severity: warn
        check:
          type: duplicate_key
        tags: [keys]
    ```
    """
    data = _read_mapping(path)
    if data is None:
        return []

    rules_data = data.get("rules") or {}
    if not isinstance(rules_data, dict):
        logger.warning("%s: 'rules' must be a mapping, skipping file", path)
        return []

    rules: list[Rule] = []

    for rule_id, rule_data in rules_data.items():
        try:
            rules.append(_parse_rule(rule_id, rule_data or {}))
        except (ValueError, ValidationError) as e:
            # Skip the broken rule, keep loading the rest
            logger.warning("Failed to load rule %s from %s: %s", rule_id, path, e)

    return rules


def _parse_rule(rule_id: str, data: dict[str, Any]) -> Rule:
    """Parse a single rule from YAML data."""
    if not isinstance(data, dict):
        raise ValueError("rule must be a mapping")

    severity_str = data.get("severity", "error")
    severity = Severity(severity_str) if isinstance(severity_str, str) else Severity.ERROR

    check_data = data.get("check", {})
    if isinstance(check_data, str):
        check_data = {"type": check_data}
    if not isinstance(check_data, dict):
        raise ValueError("check must be a checker name or a mapping")

    check = Check(
        type=check_data.get("type", ""),
        params=check_data.get("params", {}),
    )

    return Rule(
        id=rule_id,
        version=data.get("version", "1.0.0"),
        title=data.get("title", rule_id),
        severity=severity,
        check=check,
        docs_url=data.get("docs_url"),
        tags=data.get("tags", []),
        deprecated=data.get("deprecated", False),
    )


def load_profile_from_yaml(path: Path) -> Profile | None:
    """
    Load a profile from a YAML file.

    YAML format:
    ```yaml
    id: strict
    version: "1.0.0"
    label: "Strict"
    base: default

    enable:
      - "*"

    disable:
      - "INI-KEY-003"

    overrides:
      severity:
        INI-KEY-001: error
    ```
    """
    data = _read_mapping(path)
    if data is None:
        return None

    if not data.get("id"):
        logger.warning("Profile file %s has no id, skipping", path)
        return None

    try:
        overrides_data = data.get("overrides") or {}
        if not isinstance(overrides_data, dict):
            raise ValueError("overrides must be a mapping")

        overrides = ProfileOverrides(
            severity=overrides_data.get("severity") or {},
            disabled=overrides_data.get("disabled") or [],
        )

        return Profile(
            id=data["id"],
            version=str(data.get("version", "1.0.0")),
            label=data.get("label", data["id"]),
            base=data.get("base"),
            enable=data.get("enable", ["*"]),
            disable=data.get("disable", []),
            overrides=overrides,
        )
    except (ValueError, ValidationError) as e:
        logger.warning("Failed to load profile from %s: %s", path, e)
        return None


def _read_mapping(path: Path) -> dict[str, Any] | None:
    """
    Read a YAML file whose top level must be a mapping.

    Returns:
        The mapping ({} for an empty file), or None if the file is missing,
        unreadable or not a mapping. Problems are logged.
    """
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("%s: top level must be a mapping, skipping file", path)
        return None
    return data


def load_profiles_from_directory(directory: Path) -> list[Profile]:
    """Load all profiles from a directory."""
    profiles: list[Profile] = []

    if not directory.exists():
        return profiles

    for pattern in ("*.yaml", "*.yml"):
        for yaml_file in sorted(directory.glob(pattern)):
            profile = load_profile_from_yaml(yaml_file)
            if profile:
                profiles.append(profile)

    return profiles


def load_rules_from_directory(directory: Path) -> list[Rule]:
    """Load all rules from YAML files in a directory."""
    all_rules: list[Rule] = []

    if not directory.exists():
        return all_rules

    for pattern in ("*.yaml", "*.yml"):
        for yaml_file in sorted(directory.glob(pattern)):
            all_rules.extend(load_rules_from_yaml(yaml_file))

    logger.debug("Loaded %d rules from %s", len(all_rules), directory)
    return all_rules
