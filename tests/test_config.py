from __future__ import annotations

import logging

import pytest

from europass_builder.config import env_number


def test_env_number_reads_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EUROPASS_TEST_TOKENS", " 2500 ")
    assert env_number("EUROPASS_TEST_TOKENS", 4000, int) == 2500


@pytest.mark.parametrize("value", [None, "", "   "])
def test_env_number_default_when_unset(monkeypatch: pytest.MonkeyPatch, value: str | None) -> None:
    if value is None:
        monkeypatch.delenv("EUROPASS_TEST_TIMEOUT", raising=False)
    else:
        monkeypatch.setenv("EUROPASS_TEST_TIMEOUT", value)
    assert env_number("EUROPASS_TEST_TIMEOUT", 60.0, float) == 60.0


@pytest.mark.parametrize(("value", "cast", "default"), [("lots", int, 4000), ("0.1.2", float, 0.1), ("1.5", int, 4000)])
def test_env_number_malformed_value_falls_back(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, value: str, cast: type, default: float
) -> None:
    monkeypatch.setenv("EUROPASS_TEST_SETTING", value)

    with caplog.at_level(logging.WARNING, logger="europass_builder.config"):
        assert env_number("EUROPASS_TEST_SETTING", default, cast) == default

    assert "EUROPASS_TEST_SETTING" in caplog.text
