# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from site_audit.config import AuditConfig, RankingTable, load_config
from site_audit.models import AuditMode


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("base_url: http://example.com/\nmax_pages: 5", ".yaml", None),
        (json.dumps({"base_url": "http://example.com", "max_pages": 5}), ".json", None),
        ("max_pages: 0", ".yaml", ValidationError),
        ("unknown_field: 1", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("base_url = 'x'", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, AuditConfig)
        assert cfg.max_pages == 5
        assert str(cfg.base_url).rstrip("/") == "http://example.com"


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_load_config_default_present(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("mode: light\n", encoding="utf-8")
    cfg = load_config(None)
    assert cfg.mode is AuditMode.LIGHT


def test_defaults():
    cfg = AuditConfig()
    assert cfg.max_pages == 15
    assert cfg.mode is AuditMode.GRADUAL
    assert cfg.discovery_max_pages == 50
    assert cfg.sitemap_max_urls == 50
    assert cfg.homepage_max_links == 30
    assert cfg.sufficient_evidence == 10
    assert cfg.page_delay == 1.0
    assert cfg.homepage_timeout == pytest.approx(15.0)


def test_config_is_frozen():
    cfg = AuditConfig()
    with pytest.raises(ValidationError):
        cfg.max_pages = 3
    assert cfg.model_copy(update={"max_pages": 3}).max_pages == 3


def test_ranking_table_lowercases_patterns():
    table = RankingTable(critical_patterns=("/Contact",), main_patterns=("/HOME",))
    assert table.critical_patterns == ("/contact",)
    assert table.main_patterns == ("/home",)
