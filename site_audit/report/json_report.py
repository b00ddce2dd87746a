# site_audit/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteAudit.

Сериализация объекта AuditRun в файл.
"""
import json
from pathlib import Path
from typing import Any, Dict

from site_audit.aggregator import to_jsonable
from site_audit.models import AuditRun


def report_data(run: AuditRun) -> Dict[str, Any]:
    """Словарь отчёта: сводка, результаты страниц и метаданные обнаружения."""
    return to_jsonable(run.to_dict())


def render_json(run: AuditRun, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт run в формате JSON по указанному пути.

    :param run: объект AuditRun с результатами аудита
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_audit.report.json_report import render_json
    report_path = render_json(run, 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report_data(run), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
