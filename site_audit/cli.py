# === FILE: site_audit/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteAudit через командную строку.

Команды:
  discover URL   Найти и ранжировать страницы сайта
  audit URL      Обнаружение + поэтапный аудит страниц, отчёты JSON/HTML
  config         Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (по умолчанию встроенные значения)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (в консоль пишется stderr)
  --log-format FORMAT Формат логирования

Команда audit опции:
  --max-pages INT     Сколько страниц анализировать
  --mode MODE         gradual (по умолчанию), full, standard, light
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблонами
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --audit-timeout SEC Таймаут всего аудита (секунд)
  --psi-key KEY       Ключ PageSpeed Insights (или переменная PSI_API_KEY)

Пример:
  site-audit audit https://example.com --max-pages 20 --mode gradual --html report.html
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_audit import __version__
from site_audit.aggregator import summary_lines, to_jsonable
from site_audit.config import AuditConfig, load_config
from site_audit.engine import discover_pages, run_tiered_audit
from site_audit.logger import DEFAULT_FORMAT, init_logging
from site_audit.models import AuditMode
from site_audit.report.html_report import render_html
from site_audit.report.json_report import render_json, report_data

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
MODES = [mode.value for mode in AuditMode]


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteAudit, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (дополнительно к stderr)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteAudit CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
        stream=sys.stderr,
    )
    try:
        cfg = load_config(config_path) if config_path else AuditConfig()
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('discover', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option('--max-pages', '-n', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Лимит приоритизированных страниц (override discovery_max_pages)')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить результат обнаружения в JSON-файл')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def discover(ctx, url, max_pages, json_output, pretty):
    """Найти и ранжировать страницы сайта."""
    cfg = ctx.obj['config']
    if max_pages is not None:
        cfg = cfg.model_copy(update={'discovery_max_pages': max_pages})
    try:
        result = asyncio.run(discover_pages(cfg, url))
    except Exception as e:
        print_error(f'Ошибка при обнаружении страниц: {e}')

    data = to_jsonable({
        'all_pages': result.all_pages,
        'prioritized_pages': [
            {'url': p.url, 'priority': p.priority, 'type': p.type, 'depth': p.depth, 'source': p.source}
            for p in result.prioritized_pages
        ],
        'metadata': {
            'source_counts': result.metadata.source_counts,
            'total_discovered': result.metadata.total_discovered,
            'coverage': result.metadata.coverage,
            'strategies_run': result.metadata.strategies_run,
            'strategies_skipped': result.metadata.strategies_skipped,
            'errors': result.metadata.errors,
        },
    })
    text = json.dumps(data, ensure_ascii=False, indent=2 if pretty else None)
    if json_output:
        json_output.parent.mkdir(parents=True, exist_ok=True)
        json_output.write_text(text, encoding='utf-8')
        click.echo(f'Discovery saved: {json_output}')
    else:
        click.echo(text)


@cli.command('audit', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option('--max-pages', '-n', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Сколько страниц анализировать (override max_pages)')
@click.option('--mode', '-m', 'mode', type=click.Choice(MODES), default=None,
              help='Режим назначения уровня анализа')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить JSON-отчёт в файл')
@click.option('--html', '-h', 'html_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить HTML-отчёт в файл')
@click.option('--template', '-t', 'template_dir', default=None,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Папка с Jinja2-шаблонами')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--audit-timeout', 'audit_timeout', type=float, default=None,
              help='Таймаут всего аудита (секунд)')
@click.option('--psi-key', 'psi_key', envvar='PSI_API_KEY', default=None,
              help='Ключ API PageSpeed Insights')
@click.pass_context
def audit(ctx, url, max_pages, mode, json_output, html_output, template_dir, pretty, audit_timeout, psi_key):
    """Запустить обнаружение и поэтапный аудит, сгенерировать отчёты."""
    cfg = ctx.obj['config']
    if psi_key:
        cfg = cfg.model_copy(update={'pagespeed_api_key': psi_key})
    try:
        coro = run_tiered_audit(cfg, url, max_pages, mode)
        if audit_timeout:
            run = asyncio.run(asyncio.wait_for(coro, timeout=audit_timeout))
        else:
            run = asyncio.run(coro)
    except asyncio.TimeoutError:
        print_error(f'Аудит не завершён за {audit_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при аудите: {e}')

    # Без --json и --html отчёт печатается в stdout
    if not json_output and not html_output:
        indent = 2 if pretty else None
        try:
            click.echo(json.dumps(report_data(run), ensure_ascii=False, indent=indent))
        except TypeError as e:
            print_error(f'Ошибка сериализации JSON: {e}')
        return

    for line in summary_lines(run.summary):
        click.echo(line)
    for rec in run.recommendations:
        click.echo(f"[{rec.priority.value}] {rec.category}: {rec.issue}")

    if json_output:
        try:
            saved_json = render_json(run, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(run, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
