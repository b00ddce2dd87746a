# File: site_audit/report/__init__.py
"""site_audit.report: Генерация отчётов (JSON и HTML), используемых CLI и тестами."""

from .html_report import render_html
from .json_report import render_json, report_data

__all__ = ["render_json", "render_html", "report_data"]
