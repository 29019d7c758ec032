# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Tests for the configuration singleton."""

import json

import pytest

from image_toggle.config import Config, deep_update, load_config


class TestLoadConfig:
    """Tests for file loading and merging."""

    def test_defaults(self):
        cfg = load_config()

        assert cfg["topics"]["input"] == "/image_raw"
        assert cfg["convert"]["initial_mode"] == "color"

    def test_yaml_override(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("convert:\n  chroma_fill: 128\nlog:\n  level: debug\n", encoding="utf-8")

        cfg = load_config(str(path))

        assert cfg["convert"]["chroma_fill"] == 128
        assert cfg["convert"]["initial_mode"] == "color"
        assert cfg["log"]["level"] == "debug"

    def test_toml_override(self, tmp_path):
        path = tmp_path / "cfg.toml"
        path.write_text('[topics]\noutput = "/gray"\n', encoding="utf-8")

        assert load_config(str(path))["topics"]["output"] == "/gray"

    def test_json_override(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"server": {"port": 9000}}), encoding="utf-8")

        cfg = load_config(str(path))

        assert cfg["server"] == {"host": "0.0.0.0", "port": 9000}

    def test_unknown_extension_keeps_defaults(self, tmp_path, caplog):
        path = tmp_path / "cfg.ini"
        path.write_text("[server]\nport=1\n", encoding="utf-8")

        assert load_config(str(path))["server"]["port"] == 8788
        assert "Unknown config extension" in caplog.text

    def test_missing_file_keeps_defaults(self, tmp_path):
        assert load_config(str(tmp_path / "absent.yaml"))["server"]["port"] == 8788

    def test_broken_file_keeps_defaults(self, tmp_path, caplog):
        path = tmp_path / "cfg.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_config(str(path))["server"]["port"] == 8788
        assert "Failed to load" in caplog.text

    def test_deep_update_merges_nested(self):
        dst = {"a": {"b": 1, "c": 2}}

        deep_update(dst, {"a": {"c": 3}, "d": 4})

        assert dst == {"a": {"b": 1, "c": 3}, "d": 4}


class TestConfig:
    """Tests for the Config singleton."""

    def test_singleton(self):
        assert Config() is Config()

    def test_dotted_get(self):
        assert Config().get("topics.queue_size") == 10

    def test_missing_key(self):
        with pytest.raises(KeyError):
            Config().get("topics.nope")

    def test_set_and_item_access(self):
        config = Config()

        config.set("convert.chroma_fill", 64)
        config["server.port"] = 1234

        assert config["convert.chroma_fill"] == 64
        assert Config.get("server.port") == 1234

    def test_load_resets(self):
        Config().set("server.port", 1)

        Config.load(None)

        assert Config.get("server.port") == 8788
