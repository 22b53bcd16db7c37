"""Tests for shopfeeds/common/config_loader.py"""

import pytest

from shopfeeds.common.config_loader import (
    CONFIG_DIR_ENV,
    load_category_tables,
    load_color_tables,
    load_config,
    load_feed_settings,
    load_market_config,
    load_material_tables,
    load_store_settings,
)


class TestLoadConfig:
    def test_raises_for_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent_file_12345.yaml")

    def test_env_override(self, tmp_path, monkeypatch):
        (tmp_path / "store.yaml").write_text("shop: other-store\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
        assert load_store_settings() == {"shop": "other-store"}

    def test_empty_file_is_empty_dict(self, tmp_path, monkeypatch):
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")
        monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
        assert load_config("empty.yaml") == {}


class TestStoreSettings:
    def test_has_throttle_policy(self):
        settings = load_store_settings()
        assert settings["throttle"]["retries"] == 6
        assert settings["throttle"]["step"] == 5
        assert settings["throttle"]["max_wait"] == 30

    def test_no_token_in_config(self):
        assert "access_token" not in load_store_settings()


class TestFeedSettings:
    @pytest.mark.parametrize("feed", ["google", "meta", "glami", "bestprice", "local_inventory"])
    def test_every_feed_has_a_stem(self, feed):
        assert load_feed_settings(feed)["stem"]

    def test_unknown_feed_raises(self):
        with pytest.raises(KeyError):
            load_feed_settings("amazon")


class TestMarketConfig:
    def test_market_codes_are_strings(self):
        markets = load_market_config()["markets"]
        assert "NO" in markets
        assert all(isinstance(code, str) for code in markets)

    def test_greece_market(self):
        gr = load_market_config()["markets"]["GR"]
        assert gr["currency"] == "EUR"
        assert gr["domain"] == "emmanuela.gr"


class TestTables:
    def test_category_tables(self):
        tables = load_category_tables()
        assert {"google", "bestprice", "glami", "product_type_labels"} <= set(tables)

    def test_color_tables(self):
        tables = load_color_tables()
        assert tables["english"]["επιχρυσωμένο"] == "Gold"
        assert tables["greek"]["ασημένιο"] == "ασημί"

    def test_material_tables(self):
        tables = load_material_tables()
        assert tables["glami"]["keep_unknown"] is True
        assert tables["google"]["default"] == "Sterling Silver"
