from __future__ import annotations


# Overrides come from JSON payloads (dict-like objects), so typing stays flexible here.
from typing import Any, Mapping

from tripwise.config.settings import Settings

"""
Per-request settings overrides (safe subset).

API and CLI callers can send `settings_overrides` to tune certain knobs for a single
optimization run (e.g. a stricter rain threshold or a wider clustering radius). This module:
- validates the override payload against a whitelist,
- deep-merges the safe subset onto current settings,
- re-validates with Pydantic to ensure types/ranges remain correct.

Security note:
We intentionally do NOT allow overriding the weather endpoint, cache paths or log levels.
"""

# A value of True allows any keys under the subtree; a nested dict only allows the listed keys.
ALLOWED_SETTINGS_OVERRIDES_TREE: dict[str, Any] = {
    "classifier": True,
    "risk": True,
    "clustering": True,
    "alerts": True,
    # Worker count is a deployment concern, so only the rewriting knobs are exposed.
    "optimizer": {
        "max_alternatives": True,
        "alternatives": True,
        "default_alternatives": True,
        "heat_shift_enabled": True,
        "heat_shift_note": True,
        "missing_location_note": True,
    },
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    # Build a new dict so the caller's `base` object is never mutated (settings are cached).
    merged: dict[str, Any] = dict(base)
    for key, override_value in override.items():
        # Both sides are mappings: merge recursively so nested keys override cleanly.
        if isinstance(override_value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(dict(merged[key]), override_value)
            continue
        merged[key] = override_value
    return merged


def _filter_overrides(
    overrides: Mapping[str, Any],
    *,
    allowed_tree: Mapping[str, Any],
    path: tuple[str, ...] = (),
) -> dict[str, Any]:
    filtered: dict[str, Any] = {}
    for key, value in overrides.items():
        # Reject unknown keys early with a precise dotted path.
        if key not in allowed_tree:
            dotted_path = ".".join((*path, key))
            raise ValueError(
                f"settings_overrides contains a disallowed key: '{dotted_path}'"
            )

        allowed = allowed_tree[key]
        if allowed is True:
            filtered[key] = value
            continue

        # Restricted subtrees must be mappings we can recurse into.
        if not isinstance(value, Mapping):
            dotted_path = ".".join((*path, key))
            raise ValueError(
                f"settings_overrides key '{dotted_path}' must be a mapping"
            )

        filtered[key] = _filter_overrides(
            value, allowed_tree=allowed, path=(*path, key)
        )
    return filtered


def apply_settings_overrides(
    settings: Settings, overrides: Mapping[str, Any] | None
) -> Settings:
    """Return `settings` with the whitelisted subset of `overrides` applied."""
    if not overrides:
        return settings

    safe_overrides = _filter_overrides(
        overrides, allowed_tree=ALLOWED_SETTINGS_OVERRIDES_TREE
    )
    merged_payload = _deep_merge(settings.model_dump(mode="python"), safe_overrides)

    # Re-validate so we never run with an invalid Settings object.
    return Settings.model_validate(merged_payload)
