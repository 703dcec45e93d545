# tests/test_sitemap_generator.py
"""Tests for sitemap.xml and robots.txt generation."""

import xml.etree.ElementTree as ET
from datetime import date, datetime, timedelta, timezone

import pytest
from folio.models import (
    BlogPostSource,
    ProjectSource,
    SitemapSourceData,
    StaticPage,
)
from folio.sitemap_generator import (
    SitemapGenerator,
    escape_xml,
    format_date,
    format_priority,
)

NS = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}
TODAY = date(2024, 5, 1)


@pytest.fixture
def generator():
    """Create a SitemapGenerator for example.com."""
    return SitemapGenerator("https://example.com")


@pytest.fixture
def source_data():
    """Static page, one project, one published post and one draft."""
    return SitemapSourceData(
        static_pages=[StaticPage(path="/", priority=1.0, changefreq="weekly")],
        projects=[ProjectSource(id="p1", slug="shop", updated_at=date(2024, 3, 1))],
        blog_posts=[
            BlogPostSource(id="b1", slug="react-tips", updated_at=datetime(2024, 4, 2, 10, 0)),
            BlogPostSource(id="b2", updated_at=date(2024, 4, 9), published=False),
        ],
    )


def locs(xml: str) -> list[str]:
    root = ET.fromstring(xml.encode("utf-8"))
    return [el.text for el in root.findall("sm:url/sm:loc", NS)]


class TestGenerateSitemap:
    """Test suite for generate_sitemap."""

    def test_exact_document(self, generator, source_data):
        """Test the full rendered document."""
        expected = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
            '  <url>\n'
            '    <loc>https://example.com/</loc>\n'
            '    <lastmod>2024-05-01</lastmod>\n'
            '    <changefreq>weekly</changefreq>\n'
            '    <priority>1.0</priority>\n'
            '  </url>\n'
            '  <url>\n'
            '    <loc>https://example.com/projects/shop</loc>\n'
            '    <lastmod>2024-03-01</lastmod>\n'
            '    <changefreq>monthly</changefreq>\n'
            '    <priority>0.8</priority>\n'
            '  </url>\n'
            '  <url>\n'
            '    <loc>https://example.com/blog/react-tips</loc>\n'
            '    <lastmod>2024-04-02</lastmod>\n'
            '    <changefreq>monthly</changefreq>\n'
            '    <priority>0.7</priority>\n'
            '  </url>\n'
            '</urlset>\n'
        )
        assert generator.generate_sitemap(source_data, today=TODAY) == expected

    def test_empty_sitemap(self, generator):
        """Test that no input produces an empty urlset."""
        xml = generator.generate_sitemap(SitemapSourceData(), today=TODAY)
        assert xml == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
            '</urlset>\n'
        )

    def test_order_is_static_projects_posts(self, generator):
        """Test group order and input order within groups."""
        data = SitemapSourceData(
            static_pages=[StaticPage("/", 1.0), StaticPage("/about", 0.9)],
            projects=[
                ProjectSource(id="2", updated_at=TODAY),
                ProjectSource(id="1", updated_at=TODAY),
            ],
            blog_posts=[
                BlogPostSource(id="b", updated_at=TODAY, published=True),
                BlogPostSource(id="a", updated_at=TODAY),
            ],
        )
        assert locs(generator.generate_sitemap(data, today=TODAY)) == [
            "https://example.com/",
            "https://example.com/about",
            "https://example.com/projects/2",
            "https://example.com/projects/1",
            "https://example.com/blog/b",
            "https://example.com/blog/a",
        ]

    def test_url_count_excludes_only_unpublished(self, generator):
        """Test that only posts with published=False are dropped."""
        data = SitemapSourceData(
            static_pages=SitemapGenerator.default_static_pages(),
            projects=[ProjectSource(id=str(i), updated_at=TODAY) for i in range(3)],
            blog_posts=[
                BlogPostSource(id="a", updated_at=TODAY, published=True),
                BlogPostSource(id="b", updated_at=TODAY, published=None),
                BlogPostSource(id="c", updated_at=TODAY, published=False),
            ],
        )
        xml = generator.generate_sitemap(data, today=TODAY)
        assert xml.count("<url>") == 6 + 3 + 2
        assert "/blog/c" not in xml

    def test_slug_falls_back_to_id(self, generator):
        """Test that entities without a slug use their id."""
        data = SitemapSourceData(projects=[ProjectSource(id="42", slug="", updated_at=TODAY)])
        assert locs(generator.generate_sitemap(data, today=TODAY)) == [
            "https://example.com/projects/42"
        ]

    def test_static_page_without_changefreq(self, generator):
        """Test that a missing changefreq omits the element."""
        data = SitemapSourceData(static_pages=[StaticPage("/about", 0.5)])
        xml = generator.generate_sitemap(data, today=TODAY)
        assert "<changefreq>" not in xml
        assert "<priority>0.5</priority>" in xml

    def test_special_characters_round_trip(self, generator):
        """Test that XML special characters are escaped and parse back."""
        path = "/search?q=a&b=<c>\"d'e"
        data = SitemapSourceData(static_pages=[StaticPage(path=path, priority=0.5)])

        xml = generator.generate_sitemap(data, today=TODAY)

        assert (
            "<loc>https://example.com/search?q=a&amp;b=&lt;c&gt;&quot;d&#39;e</loc>" in xml
        )
        assert locs(xml) == [f"https://example.com{path}"]

    def test_static_pages_use_today(self, generator):
        """Test that the injected date is used for static pages."""
        data = SitemapSourceData(static_pages=[StaticPage("/", 1.0)])
        xml = generator.generate_sitemap(data, today=date(2023, 12, 31))
        assert "<lastmod>2023-12-31</lastmod>" in xml

    def test_static_pages_default_to_current_utc_date(self, generator):
        """Test that static pages get a date when none is injected."""
        entries = generator.build_entries(SitemapSourceData(static_pages=[StaticPage("/", 1.0)]))
        assert entries[0].lastmod in {
            (datetime.now(timezone.utc) + timedelta(days=delta)).date().isoformat()
            for delta in (-1, 0)
        }

    def test_aware_datetime_is_converted_to_utc(self, generator):
        """Test that lastmod is the UTC calendar date."""
        updated = datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        data = SitemapSourceData(projects=[ProjectSource(id="p", updated_at=updated)])
        xml = generator.generate_sitemap(data, today=TODAY)
        assert "<lastmod>2023-12-31</lastmod>" in xml

    def test_iso_string_dates_are_normalized(self, generator):
        """Test that ISO date strings are reduced to their UTC calendar date."""
        data = SitemapSourceData(projects=[
            ProjectSource(id="a", updated_at="2024-02-03T12:00:00Z"),
            ProjectSource(id="b", updated_at="2024-02-03T23:30:00-05:00"),
        ])
        xml = generator.generate_sitemap(data, today=TODAY)
        assert "<lastmod>2024-02-03</lastmod>" in xml
        assert "<lastmod>2024-02-04</lastmod>" in xml
        assert "T12:00:00" not in xml


class TestBaseUrl:
    """Test base URL handling."""

    def test_default_base_url(self):
        """Test the default site URL."""
        assert SitemapGenerator().base_url == "https://yourportfolio.com"

    def test_single_trailing_slash_is_removed(self):
        """Test that one trailing slash is stripped."""
        assert SitemapGenerator("https://example.com/").base_url == "https://example.com"
        assert SitemapGenerator("https://example.com//").base_url == "https://example.com/"

    def test_no_double_slash_in_locs(self):
        """Test that a trailing slash doesn't produce '//' in paths."""
        generator = SitemapGenerator("https://example.com/")
        data = SitemapSourceData(projects=[ProjectSource(id="1", updated_at=TODAY)])
        assert locs(generator.generate_sitemap(data, today=TODAY)) == [
            "https://example.com/projects/1"
        ]


class TestGenerateRobotsTxt:
    """Test suite for generate_robots_txt."""

    def test_defaults(self, generator):
        """Test the default robots.txt."""
        assert generator.generate_robots_txt() == (
            "User-agent: *\n"
            "Allow: /\n"
            "Disallow: /admin\n"
            "Disallow: /api\n"
            "\n"
            "Sitemap: https://example.com/sitemap.xml\n"
        )

    def test_all_options(self, generator):
        """Test crawl delay, custom paths and sitemap URL."""
        robots = generator.generate_robots_txt(
            allow_all=False,
            disallowed_paths=["/private"],
            crawl_delay=5,
            sitemap_url="https://cdn.example.com/sitemap.xml",
        )
        assert robots.splitlines() == [
            "User-agent: *",
            "Disallow: /private",
            "Crawl-delay: 5",
            "",
            "Sitemap: https://cdn.example.com/sitemap.xml",
        ]

    def test_zero_crawl_delay_is_omitted(self, generator):
        """Test that a zero delay doesn't emit a Crawl-delay line."""
        assert "Crawl-delay" not in generator.generate_robots_txt(crawl_delay=0)

    def test_empty_disallow_list(self, generator):
        """Test that an explicit empty list emits no Disallow lines."""
        robots = generator.generate_robots_txt(disallowed_paths=[])
        assert "Disallow" not in robots
        assert robots.startswith("User-agent: *\nAllow: /\n\nSitemap: ")


class TestHelpers:
    """Test formatting helpers."""

    @pytest.mark.parametrize("value,expected", [
        (1, "1.0"),
        (0.8, "0.8"),
        (0.0, "0.0"),
    ])
    def test_format_priority(self, value, expected):
        """Test one-decimal priority formatting."""
        assert format_priority(value) == expected

    def test_format_date(self):
        """Test date, datetime and string inputs."""
        assert format_date(date(2024, 2, 3)) == "2024-02-03"
        assert format_date(datetime(2024, 2, 3, 23, 59)) == "2024-02-03"
        assert format_date("2024-02-03") == "2024-02-03"
        assert format_date("2024-02-03T12:00:00Z") == "2024-02-03"
        assert format_date("2024-02-03T23:30:00-05:00") == "2024-02-04"
        assert format_date("not-a-date") == "not-a-date"

    def test_escape_xml(self):
        """Test the five XML special characters."""
        assert escape_xml("&<>\"'") == "&amp;&lt;&gt;&quot;&#39;"

    def test_default_static_pages(self):
        """Test the default portfolio pages."""
        pages = SitemapGenerator.default_static_pages()
        assert [p.path for p in pages] == [
            "/", "/about", "/projects", "/blog", "/contact", "/templates",
        ]
        assert pages[0].priority == 1.0
        assert pages[3].changefreq == "daily"


class TestSourceDataFromDict:
    """Test loading source data from parsed YAML/JSON."""

    def test_camel_case_keys(self):
        """Test camelCase keys and ISO date strings."""
        data = SitemapSourceData.from_dict({
            "staticPages": [{"path": "/", "priority": 1.0, "changefreq": "weekly"}],
            "projects": [{"id": 1, "slug": "shop", "updatedAt": "2024-02-03T12:00:00Z"}],
            "blogPosts": [{"id": "7", "updatedAt": "2024-02-04", "published": False}],
        })
        assert data.static_pages[0].changefreq == "weekly"
        assert data.projects[0].id == "1"
        assert data.projects[0].updated_at == datetime(2024, 2, 3, 12, 0, tzinfo=timezone.utc)
        assert data.blog_posts[0].published is False

    def test_snake_case_keys_and_dates(self):
        """Test snake_case keys with dates already parsed by YAML."""
        data = SitemapSourceData.from_dict({
            "static_pages": [{"path": "/about", "priority": 0.9}],
            "blog_posts": [{"id": "7", "slug": "react-tips", "updated_at": date(2024, 4, 2)}],
        })
        assert data.static_pages[0].changefreq is None
        assert data.projects == []
        assert data.blog_posts[0].updated_at == date(2024, 4, 2)
        assert data.blog_posts[0].published is None

    def test_missing_updated_at_raises(self):
        """Test that a project without a date is rejected."""
        with pytest.raises(KeyError):
            SitemapSourceData.from_dict({"projects": [{"id": "1"}]})

    def test_null_sections_are_empty(self):
        """Test that null sections load as empty lists."""
        data = SitemapSourceData.from_dict({"staticPages": None, "projects": None, "blogPosts": None})
        assert data.static_pages == []
        assert data.projects == []
        assert data.blog_posts == []
