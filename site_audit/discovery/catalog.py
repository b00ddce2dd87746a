# File: site_audit/discovery/catalog.py
"""site_audit.discovery.catalog: типовые важные страницы (испанские и английские адреса)."""

from __future__ import annotations

from typing import List, Sequence

from site_audit.urls import normalize

DEFAULT_PATHS: Sequence[str] = (
    # главная и навигация
    "/", "/index", "/home", "/inicio", "/principal",
    # о компании
    "/nosotros", "/about", "/acerca-de", "/about-us", "/empresa", "/company",
    "/quienes-somos", "/who-we-are", "/mision", "/vision", "/valores",
    # услуги и продукты
    "/servicios", "/services", "/productos", "/products", "/catalogo", "/catalog",
    "/soluciones", "/solutions", "/oferta", "/portfolio", "/trabajos", "/proyectos",
    "/casos-exito",
    # контакты и поддержка
    "/contacto", "/contact", "/contact-us", "/contactenos", "/soporte", "/support",
    "/ayuda", "/help",
    # юридическая информация
    "/privacidad", "/privacy", "/politica-privacidad", "/privacy-policy", "/terminos",
    "/terms", "/condiciones", "/terms-conditions", "/legal", "/aviso-legal",
    # блог и контент
    "/blog", "/noticias", "/news", "/articulos", "/articles", "/recursos", "/resources",
    "/guias", "/guides", "/tutoriales",
    # FAQ
    "/faq", "/preguntas-frecuentes", "/frequent-questions",
    # интернет-магазин
    "/tienda", "/store", "/shop", "/carrito", "/cart", "/checkout", "/pago", "/payment",
    "/cuenta", "/account", "/perfil", "/profile",
    # соцсети
    "/redes-sociales", "/social-media", "/siguenos",
    # карьера и команда
    "/trabaja-con-nosotros", "/careers", "/equipo", "/team", "/empleos",
    # пресса
    "/prensa", "/press", "/media", "/galeria", "/gallery",
    # филиалы
    "/ubicaciones", "/locations", "/sucursales", "/oficinas", "/offices",
    # языковые разделы
    "/en", "/es", "/pt", "/fr",
)


def default_pages(base_url: str, paths: Sequence[str] = DEFAULT_PATHS) -> List[str]:
    """Возвращает уникальные проверенные URL каталога для *base_url*."""
    base = base_url.rstrip("/")
    pages: List[str] = []
    for path in paths:
        url = normalize(f"{base}{path}", base)
        if url is not None and url not in pages:
            pages.append(url)
    return pages
