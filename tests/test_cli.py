# File: tests/test_cli.py
"""Тесты для CLI (`site_audit/cli.py`) с использованием click.testing.CliRunner.
Проверяют команды `discover`, `audit`, `config`, `--version`, а также обработку ошибок.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import site_audit.cli as cli_module
from site_audit.aggregator import build_site_summary
from site_audit.cli import cli
from site_audit.logger import init_logging
from site_audit.models import (
    AnalysisLevel,
    AuditMode,
    AuditRun,
    DiscoveryMetadata,
    DiscoveryResult,
    PageAuditResult,
    PageSource,
    PageType,
    RankedPage,
    Recommendation,
    RecommendationPriority,
)

BASE = "https://example.com"


def fake_discovery() -> DiscoveryResult:
    return DiscoveryResult(
        all_pages=[f"{BASE}/contact"],
        prioritized_pages=[RankedPage(f"{BASE}/contact", 12, PageType.CONTACT, 1, PageSource.CATALOG)],
        metadata=DiscoveryMetadata(source_counts={"default-catalog": 1}, total_discovered=1, coverage=5),
    )


def fake_run(max_pages: int = 1, mode: AuditMode = AuditMode.GRADUAL) -> AuditRun:
    results = [
        PageAuditResult(url=f"{BASE}/contact", analysis_level=AnalysisLevel.FULL, success=True,
                        analyses={"seo": {"score": 80}}, priority=12, type=PageType.CONTACT),
    ]
    return AuditRun(
        base_url=BASE,
        mode=mode,
        max_pages=max_pages,
        page_results=results,
        summary=build_site_summary(results, coverage=5),
        discovery=fake_discovery(),
        recommendations=(
            Recommendation(RecommendationPriority.HIGH, "Mobile Optimization", "Mobile 40pts vs Desktop 80pts",
                           impact="Most visitors get a poor mobile experience"),
        ),
    )


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI перенастраивает логгер на поток CliRunner; возвращаем обычный."""
    yield
    init_logging()


@pytest.fixture(autouse=True)
def patch_engine(monkeypatch):
    """Патчим discover_pages и run_tiered_audit: без сетевых запросов."""
    calls = {}

    async def fake_discover(cfg, url=None):
        calls["discover"] = (cfg, url)
        return fake_discovery()

    async def fake_audit(cfg, url=None, max_pages=None, mode=None):
        calls["audit"] = (cfg, url, max_pages, mode)
        return fake_run(max_pages or cfg.max_pages, AuditMode(mode or cfg.mode))

    monkeypatch.setattr(cli_module, "discover_pages", fake_discover)
    monkeypatch.setattr(cli_module, "run_tiered_audit", fake_audit)
    return calls


@pytest.fixture()
def patch_reports(monkeypatch):
    """Патчим render_json и render_html для предсказуемости."""
    monkeypatch.setattr(cli_module, "render_json", lambda run, path, pretty=True: str(path))
    monkeypatch.setattr(cli_module, "render_html", lambda run, tpl, path: str(path))


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteAudit" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(json.dumps({"base_url": BASE, "max_pages": 7}), encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["base_url"].rstrip("/") == BASE
    assert data["max_pages"] == 7
    assert data["mode"] == "gradual"


def test_bad_config(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("max_pages: -1\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_discover_stdout(patch_engine):
    result = CliRunner().invoke(cli, ["discover", BASE, "--max-pages", "5"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["prioritized_pages"][0]["type"] == "contact"
    assert data["prioritized_pages"][0]["source"] == "default-catalog"
    assert data["metadata"]["coverage"] == 5
    cfg, url = patch_engine["discover"]
    assert url == BASE
    assert cfg.discovery_max_pages == 5


def test_discover_json_file(tmp_path):
    out = tmp_path / "discovery.json"
    result = CliRunner().invoke(cli, ["discover", BASE, "--json", str(out)])
    assert result.exit_code == 0
    assert json.loads(out.read_text(encoding="utf-8"))["all_pages"] == [f"{BASE}/contact"]


def test_audit_stdout(patch_engine):
    result = CliRunner().invoke(cli, ["audit", BASE, "--max-pages", "3", "--mode", "light"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["max_pages"] == 3
    assert data["mode"] == "light"
    assert data["page_results"][0]["analysis_level"] == "full"
    assert data["recommendations"][0]["priority"] == "HIGH"
    assert patch_engine["audit"][1:] == (BASE, 3, "light")


def test_audit_report_files(tmp_path, patch_reports):
    json_out = tmp_path / "report.json"
    html_out = tmp_path / "report.html"
    result = CliRunner().invoke(cli, ["audit", BASE, "--json", str(json_out), "--html", str(html_out)])
    assert result.exit_code == 0
    assert "Pages analysed: 1/1" in result.output
    assert "[HIGH] Mobile Optimization: Mobile 40pts vs Desktop 80pts" in result.output
    assert f"JSON report: {json_out}" in result.output
    assert f"HTML report: {html_out}" in result.output


def test_audit_writes_real_reports(tmp_path):
    json_out = tmp_path / "report.json"
    html_out = tmp_path / "report.html"
    result = CliRunner().invoke(cli, ["audit", BASE, "--json", str(json_out), "--html", str(html_out)])
    assert result.exit_code == 0
    assert json.loads(json_out.read_text(encoding="utf-8"))["base_url"] == BASE
    assert BASE in html_out.read_text(encoding="utf-8")


def test_audit_psi_key_from_env(patch_engine):
    result = CliRunner().invoke(cli, ["audit", BASE], env={"PSI_API_KEY": "k-123"})
    assert result.exit_code == 0
    assert patch_engine["audit"][0].pagespeed_api_key == "k-123"


def test_audit_invalid_mode():
    result = CliRunner().invoke(cli, ["audit", BASE, "--mode", "turbo"])
    assert result.exit_code != 0


def test_audit_error(monkeypatch):
    async def broken(cfg, url=None, max_pages=None, mode=None):
        raise ValueError("Base URL must be an absolute http(s) URL: 'nope'")

    monkeypatch.setattr(cli_module, "run_tiered_audit", broken)
    result = CliRunner().invoke(cli, ["audit", "nope"])
    assert result.exit_code == 1
    assert "Ошибка при аудите" in result.output


def test_audit_timeout(monkeypatch):
    async def slow(cfg, url=None, max_pages=None, mode=None):
        await asyncio.sleep(2)
        return fake_run()

    monkeypatch.setattr(cli_module, "run_tiered_audit", slow)
    result = CliRunner().invoke(cli, ["audit", BASE, "--audit-timeout", "0.1"])
    assert result.exit_code != 0
    assert "не завершён" in result.output
