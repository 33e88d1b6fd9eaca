# app/api/endpoints/seo.py
import re
from datetime import date, datetime
from typing import List
from urllib.parse import quote
from xml.sax.saxutils import escape

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from app.core.config import settings
from app.db.database import database

router = APIRouter()

STATIC_PAGES = [
    ("", "1.0", "daily"),
    ("/artwork", "0.9", "daily"),
    ("/ma3rid", "0.8", "weekly"),
    ("/artist-showcase", "0.7", "weekly"),
]


def lastmod(value) -> str:
    """YYYY-MM-DD for a timestamp that may come back as a datetime or a string"""
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, str) and len(value) >= 10:
        return value[:10]
    return date.today().isoformat()


def url_entry(loc: str, modified: str, changefreq: str, priority: str) -> str:
    return (
        "  <url>\n"
        f"    <loc>{escape(loc)}</loc>\n"
        f"    <lastmod>{modified}</lastmod>\n"
        f"    <changefreq>{changefreq}</changefreq>\n"
        f"    <priority>{priority}</priority>\n"
        "  </url>\n"
    )


def category_slug(name: str) -> str:
    return quote(re.sub(r"\s+", "-", name.lower()))


@router.get("/sitemap.xml")
def sitemap():
    base_url = settings.FRONTEND_URL.rstrip("/")

    categories = database.query(
        "SELECT id, name, updated_at FROM categories WHERE is_active = :active ORDER BY name ASC",
        {"active": True},
    )
    artworks = database.query(
        "SELECT id, updated_at FROM artworks "
        "WHERE is_active = :active AND status = 'AVAILABLE' ORDER BY updated_at DESC",
        {"active": True},
    )

    today = date.today().isoformat()
    entries: List[str] = [url_entry(f"{base_url}{path}", today, freq, prio) for path, prio, freq in STATIC_PAGES]
    entries += [
        url_entry(f"{base_url}/category/{category_slug(c['name'])}", lastmod(c["updated_at"]), "weekly", "0.8")
        for c in categories
    ]
    entries += [
        url_entry(f"{base_url}/artwork/{a['id']}", lastmod(a["updated_at"]), "monthly", "0.6")
        for a in artworks
    ]

    body = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"\n'
        '        xmlns:image="http://www.google.com/schemas/sitemap-image/1.1">\n'
        + "".join(entries)
        + "</urlset>"
    )
    return Response(content=body, media_type="application/xml")


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    base_url = settings.FRONTEND_URL.rstrip("/")
    return (
        "User-agent: *\n"
        "Allow: /\n"
        "\n"
        "# Sitemaps\n"
        f"Sitemap: {base_url}/sitemap.xml\n"
        "\n"
        "# Crawl-delay\n"
        "Crawl-delay: 1\n"
        "\n"
        "# Disallow admin and API routes\n"
        "Disallow: /admin/\n"
        "Disallow: /api/\n"
        "Disallow: /login/\n"
        "Disallow: /register/\n"
    )
