"""
tests/test_config.py — YAML Configuration Loader
=================================================
"""

from __future__ import annotations

import pytest

from slackstats.config import StatsConfig, load_config


def _write(tmp_path, text: str):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_full_file(tmp_path):
    path = _write(tmp_path, """
listen_host: 0.0.0.0
listen_port: 9090
summary_channel_id: C0123ABCD
ignored_uids:
  - B01INTEGRATION
  - U0DEACTIVATED
""")
    cfg = load_config(path)
    assert cfg == StatsConfig(
        listen_host="0.0.0.0",
        listen_port=9090,
        summary_channel_id="C0123ABCD",
        ignored_uids=frozenset({"B01INTEGRATION", "U0DEACTIVATED"}),
    )


def test_empty_file_gives_defaults(tmp_path):
    assert load_config(_write(tmp_path, "")) == StatsConfig()


def test_single_ignored_uid_string(tmp_path):
    cfg = load_config(_write(tmp_path, "ignored_uids: B01INTEGRATION\n"))
    assert cfg.ignored_uids == frozenset({"B01INTEGRATION"})


def test_blank_channel_is_none(tmp_path):
    cfg = load_config(_write(tmp_path, "summary_channel_id: ''\n"))
    assert cfg.summary_channel_id is None


def test_bad_port_raises(tmp_path):
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, "listen_port: eighty\n"))


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_missing_file_ok(tmp_path):
    assert load_config(tmp_path / "nope.yaml", missing_ok=True) == StatsConfig()
