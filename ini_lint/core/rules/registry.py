"""
Rule Registry.

Central registry for all rules and profiles.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path

from .loader import load_profiles_from_directory, load_rules_from_directory
from .models import Profile, ProfileOverrides, Rule, Severity

logger = logging.getLogger(__name__)

PROFILE_DIR_ENV = "INI_LINT_PROFILE_DIR"


class RuleRegistry:
    """
    Central registry for all rules.

    Loads rules from:
    1. Built-in YAML files
    2. Custom rule directories (INI_LINT_PROFILE_DIR or load_from_directory)
    """

    def __init__(self) -> None:
        self.rules: dict[str, Rule] = {}
        self.profiles: dict[str, Profile] = {}
        self._loaded = False

    def register_rule(self, rule: Rule) -> None:
        self.rules[rule.id] = rule

    def register_profile(self, profile: Profile) -> None:
        self.profiles[profile.id] = profile

    def get_rule(self, rule_id: str) -> Rule | None:
        return self.rules.get(rule_id)

    def get_profile(self, profile_id: str) -> Profile | None:
        return self.profiles.get(profile_id)

    def get_rules_for_profile(self, profile: Profile) -> list[Rule]:
        """
        Get rules enabled by profile, with overrides applied.

        Handles:
        - Glob patterns in enable/disable
        - Severity overrides
        - Profile inheritance via base
        """
        resolved_profile = self._resolve_profile(profile)

        enabled_rules: list[Rule] = []

        for rule in self.rules.values():
            if rule.deprecated:
                continue

            matches_enable = any(
                fnmatch.fnmatch(rule.id, pattern) for pattern in resolved_profile.enable
            )
            matches_disable = any(
                fnmatch.fnmatch(rule.id, pattern) for pattern in resolved_profile.disable
            )
            explicitly_disabled = rule.id in resolved_profile.overrides.disabled

            if not matches_enable or matches_disable or explicitly_disabled:
                continue

            severity_str = resolved_profile.overrides.severity.get(rule.id)
            if severity_str is not None:
                try:
                    rule = rule.model_copy(update={"severity": Severity(severity_str)})
                except ValueError:
                    logger.warning(
                        "Profile %s: unknown severity %r for %s",
                        profile.id,
                        severity_str,
                        rule.id,
                    )

            enabled_rules.append(rule)

        return enabled_rules

    def _resolve_profile(self, profile: Profile, seen: frozenset[str] = frozenset()) -> Profile:
        """
        Resolve profile inheritance.

        A base that is already part of the chain is ignored, so cycles stop
        at the profile that closes them.
        """
        if not profile.base:
            return profile

        seen = seen | {profile.id}
        if profile.base in seen:
            logger.warning(
                "Profile %s: inheritance cycle through %s, ignoring base",
                profile.id,
                profile.base,
            )
            return profile.model_copy(update={"base": None})

        base = self.get_profile(profile.base)
        if not base:
            logger.warning("Profile %s: base profile %s not found", profile.id, profile.base)
            return profile

        resolved_base = self._resolve_profile(base, seen)

        # Merge: profile overrides base
        merged_enable = resolved_base.enable + [
            p for p in profile.enable if p not in resolved_base.enable
        ]
        merged_disable = resolved_base.disable + [
            p for p in profile.disable if p not in resolved_base.disable
        ]
        merged_severity = {**resolved_base.overrides.severity, **profile.overrides.severity}
        merged_disabled = sorted(
            set(resolved_base.overrides.disabled) | set(profile.overrides.disabled)
        )

        return Profile(
            id=profile.id,
            version=profile.version,
            label=profile.label,
            base=None,  # Already resolved
            enable=merged_enable,
            disable=merged_disable,
            overrides=ProfileOverrides(
                severity=merged_severity,
                disabled=merged_disabled,
            ),
        )

    def load_builtin(self) -> None:
        """Load built-in rules from package."""
        if self._loaded:
            return

        package_dir = Path(__file__).parent.parent.parent
        rules_dir = package_dir / "rules"
        self.load_from_directory(rules_dir)

        self._loaded = True

    def load_from_directory(self, directory: Path) -> None:
        """Load rules and profiles from a custom directory."""
        for rule in load_rules_from_directory(directory):
            self.register_rule(rule)

        profiles_dir = directory / "profiles"
        if profiles_dir.exists():
            for profile in load_profiles_from_directory(profiles_dir):
                self.register_profile(profile)


# Global registry instance
_registry: RuleRegistry | None = None


def get_registry() -> RuleRegistry:
    """Get the global rule registry."""
    global _registry
    if _registry is None:
        _registry = RuleRegistry()
        _registry.load_builtin()

        extra_dir = os.environ.get(PROFILE_DIR_ENV)
        if extra_dir:
            logger.info("Loading extra rules and profiles from %s", extra_dir)
            _registry.load_from_directory(Path(extra_dir))
    return _registry


def reset_registry() -> None:
    """Reset the global registry (for testing)."""
    global _registry
    _registry = None
