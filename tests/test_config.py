import pytest

import easy_apply_crawler.config as config


def test_every_profile_has_the_same_keys():
    keys = set(config.TIMING_PROFILES["default"])
    for name, profile in config.TIMING_PROFILES.items():
        assert set(profile) == keys, name


def test_shipped_profiles_pass_validation():
    for profile in config.TIMING_PROFILES.values():
        assert config.validate_timing(profile) == []


def test_validation_flags_values_below_floor():
    profile = dict(config.TIMING_PROFILES["default"], pagination_settle=200, poll_interval=-1)

    violations = config.validate_timing(profile)

    assert any(v.startswith("pagination_settle=200ms") for v in violations)
    assert any("negative" in v for v in violations)


def test_speed_flags_select_profile(monkeypatch):
    monkeypatch.setattr(config, "SUPER_DEV_SPEED", True)
    assert config.get_active_timing() is config.TIMING_PROFILES["super_dev"]

    monkeypatch.setattr(config, "SUPER_DEV_SPEED", False)
    monkeypatch.setattr(config, "DEV_TEST_SPEED", True)
    assert config.get_active_timing() is config.TIMING_PROFILES["dev_test"]


def test_invalid_profile_falls_back_to_default(monkeypatch):
    broken = dict(config.TIMING_PROFILES["dev_test"], step_settle=10)
    monkeypatch.setitem(config.TIMING_PROFILES, "dev_test", broken)
    monkeypatch.setattr(config, "DEV_TEST_SPEED", True)

    assert config.get_active_timing() is config.TIMING_PROFILES["default"]


def test_required_env(monkeypatch):
    monkeypatch.setenv("LINKEDIN_USERNAME", "someone@example.com")
    monkeypatch.delenv("LINKEDIN_PASSWORD", raising=False)

    assert config.get_required_env("LINKEDIN_USERNAME") == "someone@example.com"
    with pytest.raises(RuntimeError, match="LINKEDIN_PASSWORD"):
        config.get_required_env("LINKEDIN_PASSWORD")
