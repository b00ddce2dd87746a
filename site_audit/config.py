# === FILE: site_audit/config.py ===
"""
Модуль для загрузки и валидации конфигурации аудита SiteAudit.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)

from site_audit.models import AuditMode, PageType


class RankingTable(BaseModel):
    """Неизменяемые таблицы ключевых слов и весов для ранжирования страниц."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    critical_patterns: Tuple[str, ...] = (
        "/producto", "/product", "/item", "/detail",
        "/contact", "/contacto", "/contact-us",
        "/service", "/servicio", "/services",
        "/about", "/acerca", "/nosotros", "/about-us",
        "/blog", "/noticias", "/news", "/articulo", "/post",
        "/faq", "/preguntas", "/help",
    )
    main_patterns: Tuple[str, ...] = (
        "/home", "/index", "/main", "/principal",
        "/empresa", "/company", "/portfolio", "/trabajos",
    )
    # порядок важен: побеждает первая подходящая метка
    type_patterns: Tuple[Tuple[PageType, Tuple[str, ...]], ...] = (
        (PageType.PRODUCT, ("/product", "/producto", "/item")),
        (PageType.BLOG, ("/blog", "/noticias", "/news")),
        (PageType.CONTACT, ("/contact", "/contacto")),
        (PageType.ABOUT, ("/about", "/acerca", "/nosotros")),
        (PageType.SERVICE, ("/service", "/servicio")),
    )
    type_order: Tuple[PageType, ...] = (
        PageType.PRODUCT,
        PageType.CONTACT,
        PageType.SERVICE,
        PageType.BLOG,
        PageType.ABOUT,
        PageType.GENERAL,
    )

    critical_weight: int = Field(8, ge=0)
    main_weight: int = Field(6, ge=0)
    shallow_bonus_base: int = Field(5, ge=0)
    query_penalty: int = Field(2, ge=0)
    file_penalty: int = Field(5, ge=0)

    @field_validator("critical_patterns", "main_patterns", mode="after")
    def _lowercase(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(p.lower() for p in v)


class AuditConfig(BaseModel):
    """Конфигурация для одного запуска обнаружения и аудита."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: Optional[HttpUrl] = Field(None, description="Корневой URL сайта (можно передать в CLI).")
    max_pages: int = Field(15, ge=1, description="Сколько страниц анализировать за один аудит.")
    mode: AuditMode = Field(AuditMode.GRADUAL, description="Режим назначения уровня анализа.")

    discovery_max_pages: int = Field(50, ge=1, description="Лимит приоритизированных страниц обнаружения.")
    sitemap_max_urls: int = Field(50, ge=1, description="Лимит URL из sitemap.")
    homepage_max_links: int = Field(30, ge=1, description="Лимит ссылок с главной страницы.")
    sufficient_evidence: int = Field(10, ge=0, description="Порог, после которого следующие источники не запускаются.")

    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос страницы (секунд).")
    homepage_timeout_factor: float = Field(1.5, ge=1.0, description="Множитель таймаута для главной страницы.")
    link_check_timeout: float = Field(3.0, gt=0, description="Таймаут HEAD-проверки ссылки.")
    max_links_checked: int = Field(10, ge=0, description="Сколько ссылок проверять на странице.")
    speed_audit_timeout: float = Field(60.0, gt=0, description="Таймаут запроса к PageSpeed Insights.")

    page_delay: float = Field(1.0, ge=0, description="Пауза между страницами (секунд).")
    pacing: Literal["fixed", "token_bucket"] = Field("fixed", description="Стратегия пауз между страницами.")
    user_agent: str = Field("SiteAuditBot/1.0 (Page Discovery)", min_length=1, description="Заголовок User-Agent.")

    critical_score_threshold: float = Field(30.0, ge=0, le=100, description="Порог оценки критической страницы.")
    pagespeed_api_key: Optional[str] = Field(None, description="Ключ API PageSpeed Insights.")
    pagespeed_endpoint: HttpUrl = Field(
        "https://www.googleapis.com/pagespeedonline/v5/runPagespeed",
        validate_default=True,
        description="Адрес API PageSpeed Insights.",
    )

    ranking: RankingTable = Field(default_factory=RankingTable)

    @field_validator("base_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @property
    def homepage_timeout(self) -> float:
        return self.timeout * self.homepage_timeout_factor


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")

# суффикс -> (название формата, парсер, ошибка парсера)
_LOADERS: dict[str, tuple[str, Callable[[str], Any], type[Exception]]] = {
    ".yaml": ("YAML", yaml.safe_load, yaml.YAMLError),
    ".yml": ("YAML", yaml.safe_load, yaml.YAMLError),
    ".json": ("JSON", json.loads, json.JSONDecodeError),
}


def _read_mapping(path: Path) -> dict[str, Any]:
    """Читает файл конфига и проверяет, что верхний уровень является mapping."""
    suffix = path.suffix.lower()
    if suffix not in _LOADERS:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix or path.name}")
    kind, parse, parse_error = _LOADERS[suffix]
    try:
        data = parse(path.read_text(encoding="utf-8"))
    except parse_error as exc:
        raise ValueError(f"Неправильный {kind} в {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень {kind} должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> AuditConfig:
    """
    Возвращает проверенный AuditConfig из YAML (.yaml/.yml) или JSON.

    ``None`` означает ``configs/default.yaml`` относительно текущей папки.
    Нет файла: FileNotFoundError; ошибки схемы: ValidationError.
    """
    path_obj = DEFAULT_CONFIG_PATH if path is None else Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
    return AuditConfig(**_read_mapping(path_obj))


__all__ = ["AuditConfig", "RankingTable", "DEFAULT_CONFIG_PATH", "load_config", "ValidationError"]
