from __future__ import annotations

import pytest

from tripwise.config.settings import get_settings
from tripwise.config.overrides import apply_settings_overrides


def test_apply_settings_overrides_returns_same_object_when_none():
    settings = get_settings()

    # No overrides: fast path returns the cached object itself.
    assert apply_settings_overrides(settings, None) is settings
    assert apply_settings_overrides(settings, {}) is settings


def test_apply_settings_overrides_can_override_risk_thresholds():
    settings = get_settings()

    out = apply_settings_overrides(settings, {"risk": {"precipitation": {"high_pct": 90}}})

    assert out.risk.precipitation.high_pct == 90
    # Sibling keys survive the deep merge.
    assert out.risk.precipitation.medium_pct == settings.risk.precipitation.medium_pct
    # The shared cached settings stay untouched (no cross-request leakage).
    assert settings.risk.precipitation.high_pct == 70


def test_apply_settings_overrides_can_extend_the_classifier_table():
    settings = get_settings()
    table = {**settings.classifier.category_sensitivity, "food": True}

    out = apply_settings_overrides(settings, {"classifier": {"category_sensitivity": table}})

    assert out.classifier.category_sensitivity["food"] is True
    assert out.classifier.category_sensitivity["beach"] is True


def test_apply_settings_overrides_rejects_disallowed_keys_with_clear_path():
    settings = get_settings()

    with pytest.raises(ValueError, match=r"disallowed key: 'ingestion'"):
        apply_settings_overrides(settings, {"ingestion": {"weather": {"base_url": "http://evil"}}})

    with pytest.raises(ValueError, match=r"disallowed key: 'optimizer\.max_workers'"):
        apply_settings_overrides(settings, {"optimizer": {"max_workers": 64}})


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()

    with pytest.raises(ValueError, match=r"settings_overrides key 'optimizer' must be a mapping"):
        apply_settings_overrides(settings, {"optimizer": 1})


def test_apply_settings_overrides_revalidates_values():
    settings = get_settings()

    # Pydantic's ValidationError is a ValueError subclass.
    with pytest.raises(ValueError):
        apply_settings_overrides(settings, {"clustering": {"radius_km": -1}})
