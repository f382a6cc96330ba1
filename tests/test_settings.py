from __future__ import annotations

import pytest

from luckydraw.core import settings as settings_module
from luckydraw.core.settings import Settings, load_settings, override


def test_defaults_when_environment_is_empty():
    loaded = load_settings({})
    assert loaded == Settings()
    assert loaded.presentation_length == 30
    assert loaded.remove_winner is True
    assert loaded.step_seconds == pytest.approx(0.1)
    assert loaded.seed is None


def test_environment_values_are_parsed():
    loaded = load_settings(
        {
            "LUCKYDRAW_PRESENTATION_LENGTH": "12",
            "LUCKYDRAW_REMOVE_WINNER": "no",
            "LUCKYDRAW_STEP_SECONDS": "0.05",
            "LUCKYDRAW_SEED": "1234",
        }
    )
    assert loaded.presentation_length == 12
    assert loaded.remove_winner is False
    assert loaded.step_seconds == pytest.approx(0.05)
    assert loaded.seed == 1234
    config = loaded.draw_config()
    assert config.presentation_length == 12
    assert config.remove_winner is False


def test_invalid_values_fall_back_with_warning(caplog):
    loaded = load_settings(
        {
            "LUCKYDRAW_PRESENTATION_LENGTH": "0",
            "LUCKYDRAW_REMOVE_WINNER": "maybe",
            "LUCKYDRAW_STEP_SECONDS": "fast",
            "LUCKYDRAW_SEED": "abc",
        }
    )
    assert loaded == Settings()
    assert "LUCKYDRAW_PRESENTATION_LENGTH" in caplog.text
    assert "LUCKYDRAW_REMOVE_WINNER" in caplog.text


def test_override_stack():
    env = {"LUCKYDRAW_PRESENTATION_LENGTH": "20"}
    with override(presentation_length=8):
        assert load_settings(env).presentation_length == 8
        with override(remove_winner=False):
            inner = load_settings(env)
            assert inner.presentation_length == 8
            assert inner.remove_winner is False
    assert load_settings(env).presentation_length == 20
    assert settings_module._OVERRIDE_STACK == []


def test_override_rejects_unknown_keys():
    with pytest.raises(TypeError):
        with override(colour="blue"):
            pass
