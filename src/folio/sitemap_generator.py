"""XML sitemap and robots.txt generation for the portfolio site."""

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from jinja2 import Environment, FileSystemLoader

from folio.constants import (
    BLOG_POST_CHANGEFREQ,
    BLOG_POST_PRIORITY,
    DEFAULT_BASE_URL,
    DEFAULT_DISALLOWED_PATHS,
    PROJECT_CHANGEFREQ,
    PROJECT_PRIORITY,
    SITEMAP_NAMESPACE,
)
from folio.models import (
    DateLike,
    SitemapEntry,
    SitemapSourceData,
    StaticPage,
    parse_iso_datetime,
)

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

# Quotes and apostrophes in addition to the & < > that escape() handles
_XML_ENTITIES = {'"': "&quot;", "'": "&#39;"}


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    return escape(str(text), _XML_ENTITIES)


def format_priority(priority: float) -> str:
    """Render a priority with exactly one decimal digit."""
    return f"{priority:.1f}"


def format_date(value: DateLike) -> str:
    """Format a date as YYYY-MM-DD.

    Aware datetimes are converted to UTC first and naive ones are taken as
    UTC. ISO 8601 strings are parsed the same way; other strings are passed
    through unchanged.
    """
    if isinstance(value, str):
        try:
            value = parse_iso_datetime(value)
        except ValueError:
            return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


class SitemapGenerator:
    """
    Build sitemap.xml and robots.txt documents.

    URLs are listed in a fixed order: static pages, then projects, then
    published blog posts, each group in input order.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        """
        Initialize the generator.

        Args:
            base_url: Absolute site URL; one trailing slash is removed
        """
        self.base_url = base_url[:-1] if base_url.endswith("/") else base_url

        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters['xml_escape'] = escape_xml
        self.env.filters['priority'] = format_priority

    def build_entries(
        self, data: SitemapSourceData, today: Optional[date] = None
    ) -> List[SitemapEntry]:
        """
        Build the ordered sitemap entries.

        Args:
            data: Static pages, projects and blog posts
            today: lastmod for static pages (defaults to the current UTC date)

        Returns:
            Entries in output order
        """
        if today is None:
            today = datetime.now(timezone.utc).date()
        today_str = format_date(today)

        entries = []

        for page in data.static_pages:
            entries.append(SitemapEntry(
                loc=f"{self.base_url}{page.path}",
                lastmod=today_str,
                changefreq=page.changefreq,
                priority=page.priority,
            ))

        for project in data.projects:
            slug = project.slug or project.id
            entries.append(SitemapEntry(
                loc=f"{self.base_url}/projects/{slug}",
                lastmod=format_date(project.updated_at),
                changefreq=PROJECT_CHANGEFREQ,
                priority=PROJECT_PRIORITY,
            ))

        # Drafts are only excluded when explicitly unpublished
        for post in data.blog_posts:
            if post.published is False:
                continue
            slug = post.slug or post.id
            entries.append(SitemapEntry(
                loc=f"{self.base_url}/blog/{slug}",
                lastmod=format_date(post.updated_at),
                changefreq=BLOG_POST_CHANGEFREQ,
                priority=BLOG_POST_PRIORITY,
            ))

        return entries

    def generate_sitemap(self, data: SitemapSourceData, today: Optional[date] = None) -> str:
        """
        Generate a complete XML sitemap.

        Args:
            data: Static pages, projects and blog posts
            today: lastmod for static pages (defaults to the current UTC date)

        Returns:
            The sitemap document
        """
        entries = self.build_entries(data, today)
        logger.info(f"Generated sitemap with {len(entries)} URLs")
        return self._build_xml_sitemap(entries)

    def generate_robots_txt(
        self,
        allow_all: bool = True,
        disallowed_paths: Optional[Sequence[str]] = None,
        crawl_delay: Optional[float] = None,
        sitemap_url: Optional[str] = None,
    ) -> str:
        """
        Generate robots.txt content.

        Args:
            allow_all: Emit ``Allow: /``
            disallowed_paths: Paths to disallow (defaults to /admin and /api)
            crawl_delay: Crawl-delay in seconds; zero or None omits the line
            sitemap_url: Sitemap location (defaults to <base_url>/sitemap.xml)

        Returns:
            The robots.txt document
        """
        if disallowed_paths is None:
            disallowed_paths = DEFAULT_DISALLOWED_PATHS
        if sitemap_url is None:
            sitemap_url = f"{self.base_url}/sitemap.xml"

        lines = ["User-agent: *"]

        if allow_all:
            lines.append("Allow: /")

        for path in disallowed_paths:
            lines.append(f"Disallow: {path}")

        if crawl_delay:
            lines.append(f"Crawl-delay: {crawl_delay}")

        lines.append("")
        lines.append(f"Sitemap: {sitemap_url}")

        return "\n".join(lines) + "\n"

    @staticmethod
    def default_static_pages() -> List[StaticPage]:
        """Get the default static pages of the portfolio site."""
        return [
            StaticPage(path="/", priority=1.0, changefreq="weekly"),
            StaticPage(path="/about", priority=0.9, changefreq="monthly"),
            StaticPage(path="/projects", priority=0.9, changefreq="weekly"),
            StaticPage(path="/blog", priority=0.8, changefreq="daily"),
            StaticPage(path="/contact", priority=0.7, changefreq="monthly"),
            StaticPage(path="/templates", priority=0.6, changefreq="monthly"),
        ]

    def _build_xml_sitemap(self, entries: List[SitemapEntry]) -> str:
        """Render entries into a <urlset> document."""
        template = self.env.get_template("sitemap.xml.j2")
        return template.render(namespace=SITEMAP_NAMESPACE, urls=entries)
