from pathlib import Path

import pytest

from packager_codes.common.config_loader import apply_overrides, load_config
from packager_codes.common.errors import ConfigError

REPO_CONFIG = Path(__file__).resolve().parents[2] / "config" / "packager_codes.yml"


def test_load_config_from_repo_config_file():
    cfg = load_config(REPO_CONFIG)
    assert cfg["directory"]["base_url"].startswith("https://")
    assert cfg["directory"]["categories"]["sort"] == "country.translation"
    assert cfg["directory"]["establishments"]["sort"] == "operatorName"
    assert cfg["geocoder"]["provider"] == "nominatim"


def test_load_config_applies_overlay_values(tmp_path: Path):
    overlay = tmp_path / "overlay.yml"
    overlay.write_text(
        """directory:
  max_pages: 1
  establishments:
    page_size: 1
geocoder:
  rate_limit_per_sec: 0.5
""",
        encoding="utf-8",
    )

    cfg = load_config(REPO_CONFIG, overlay_path=overlay)

    assert cfg["directory"]["max_pages"] == 1
    assert cfg["directory"]["establishments"]["page_size"] == 1
    assert cfg["directory"]["establishments"]["sort"] == "operatorName"
    assert cfg["geocoder"]["rate_limit_per_sec"] == 0.5


def test_load_config_missing_overlay_is_ignored(tmp_path: Path):
    cfg = load_config(REPO_CONFIG, overlay_path=tmp_path / "absent.yml")
    assert cfg["geocoder"]["cache"] is True


def test_load_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yml")


def test_load_config_invalid_overlay_raises(tmp_path: Path):
    overlay = tmp_path / "overlay.yml"
    overlay.write_text("directory:\n  rate_limit_per_sec: -1\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(REPO_CONFIG, overlay_path=overlay)


def test_load_config_malformed_yaml_raises(tmp_path: Path):
    broken = tmp_path / "broken.yml"
    broken.write_text("directory: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(broken)


def test_apply_overrides_sets_max_pages_and_cache():
    cfg = load_config(REPO_CONFIG)

    updated = apply_overrides(cfg, max_pages=2, geocode_cache=False)

    assert updated["directory"]["max_pages"] == 2
    assert updated["geocoder"]["cache"] is False
    assert cfg["directory"]["max_pages"] is None


def test_apply_overrides_without_values_returns_same_config():
    cfg = load_config(REPO_CONFIG)
    assert apply_overrides(cfg) is cfg
