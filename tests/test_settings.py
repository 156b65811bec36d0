from __future__ import annotations

import asyncio
import logging

import pytest

from stored_data import StoreContext, StoreOptions, get_settings, load_settings


def test_defaults_without_environment():
    settings = get_settings()
    assert settings.default_encoding == "utf-8"
    assert settings.auto_validate is True
    assert settings.coerce is False
    assert settings.log_level is None


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STORED_DATA_ENCODING", "latin-1")
    monkeypatch.setenv("STORED_DATA_AUTO_VALIDATE", "off")
    monkeypatch.setenv("STORED_DATA_COERCE", "Yes")
    monkeypatch.setenv("STORED_DATA_LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.default_encoding == "latin-1"
    assert settings.auto_validate is False
    assert settings.coerce is True
    assert settings.log_level == logging.DEBUG


def test_env_file_is_loaded_without_overriding(monkeypatch: pytest.MonkeyPatch, tmp_path):
    env_file = tmp_path / "local.env"
    env_file.write_text("STORED_DATA_COERCE=true\nSTORED_DATA_ENCODING=utf-16\n", encoding="utf-8")
    monkeypatch.setenv("STORED_DATA_ENCODING", "ascii")

    settings = load_settings(env_file)
    assert settings.coerce is True
    assert settings.default_encoding == "ascii"


def test_options_fall_back_to_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STORED_DATA_AUTO_VALIDATE", "0")
    resolved = StoreOptions(coerce=True).resolved(get_settings())
    assert resolved.encoding == "utf-8"
    assert resolved.auto_validate is False
    assert resolved.coerce is True

    explicit = StoreOptions(autoValidate=True, encoding="ascii").resolved(get_settings())
    assert explicit.auto_validate is True
    assert explicit.encoding == "ascii"


def test_unknown_encoding_is_rejected():
    from pydantic import ValidationError as OptionsError

    with pytest.raises(OptionsError):
        StoreOptions(encoding="no-such-codec")
    with pytest.raises(OptionsError):
        StoreOptions.model_validate({"autoValidate": True, "typo": 1})


def test_unknown_encoding_from_environment_fails_before_touching_disk(monkeypatch: pytest.MonkeyPatch, tmp_path):
    from pydantic import ValidationError as OptionsError

    monkeypatch.setenv("STORED_DATA_ENCODING", "no-such-codec")
    with pytest.raises(OptionsError):
        StoreOptions().resolved(get_settings())

    async def _run():
        with pytest.raises(OptionsError):
            await StoreContext().open({"file": tmp_path / "new" / "doc.json", "schema": {"n": "number"}})

    asyncio.run(_run())
    assert not (tmp_path / "new").exists()


def test_context_from_env_applies_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setenv("STORED_DATA_COERCE", "1")
    monkeypatch.setenv("STORED_DATA_LOG_LEVEL", "WARNING")
    package_logger = logging.getLogger("stored_data")
    original_level = package_logger.level

    try:
        context = StoreContext.from_env(env_file=None)
        assert context.settings.coerce is True
        assert package_logger.level == logging.WARNING
    finally:
        package_logger.setLevel(original_level)

    async def _run():
        path = tmp_path / "coerced.json"
        path.write_text('{"count": "12"}', encoding="utf-8")
        store = await context.open({"file": path, "schema": {"count": "number"}})
        assert store.data == {"count": 12}

    asyncio.run(_run())
