from pathlib import Path

import pytest
from pydantic import ValidationError

from searchConfig import Settings


def test_settings_defaults() -> None:
    config = Settings()

    assert config.max_listings_per_location == 20
    assert config.strict_listing_limit is False
    assert config.max_vehicle_quantity == 1000
    assert config.log_level == "INFO"
    assert config.listings_path == Path("listings.json").resolve()


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("STORAGE_MAX_LISTINGS_PER_LOCATION", "12")
    monkeypatch.setenv("STORAGE_STRICT_LISTING_LIMIT", "true")
    monkeypatch.setenv("STORAGE_LISTINGS_PATH", str(tmp_path / "catalog.json"))

    config = Settings()

    assert config.max_listings_per_location == 12
    assert config.strict_listing_limit is True
    assert config.listings_path == tmp_path / "catalog.json"


def test_settings_normalises_log_level() -> None:
    assert Settings(log_level="debug").log_level == "DEBUG"


def test_settings_rejects_unknown_log_level() -> None:
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_settings_rejects_negative_listing_limit() -> None:
    with pytest.raises(ValidationError):
        Settings(max_listings_per_location=-1)
