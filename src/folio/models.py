"""Data models for lead scoring, SEO analysis and sitemap generation."""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


# ============================================================================
# SEO Analysis Models
# ============================================================================

class RecommendationType(Enum):
    """Severity of an SEO recommendation."""
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Impact(Enum):
    """Expected impact of acting on a recommendation."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Recommendation:
    """A single actionable message explaining a sub-score."""

    type: RecommendationType
    message: str
    impact: Impact

    def to_dict(self) -> dict:
        return {
            'type': self.type.value,
            'message': self.message,
            'impact': self.impact.value,
        }


@dataclass
class SEOPageInput:
    """Title, meta description and keywords of a single page."""

    title: str = ""
    description: str = ""
    keywords: list[str] = field(default_factory=list)  # not de-duplicated


@dataclass
class TitleAnalysis:
    """Page title analysis result."""

    length: int
    score: int  # 0-100
    recommendations: list[Recommendation] = field(default_factory=list)


@dataclass
class DescriptionAnalysis:
    """Meta description analysis result."""

    length: int
    score: int  # 0-100
    recommendations: list[Recommendation] = field(default_factory=list)


@dataclass
class KeywordAnalysis:
    """Keyword list analysis, cross-checked against title and description."""

    keywords_in_title: int
    keywords_in_description: int
    score: int  # 0-100
    recommendations: list[Recommendation] = field(default_factory=list)


@dataclass
class OverallSEOResult:
    """Weighted overall SEO score."""

    score: int  # 0-100
    rating: str  # excellent/good/fair/poor
    all_recommendations: list[Recommendation] = field(default_factory=list)


@dataclass
class SEOReport:
    """All sub-analyses for a page plus the combined result."""

    page: SEOPageInput
    title: TitleAnalysis
    description: DescriptionAnalysis
    keywords: KeywordAnalysis
    overall: OverallSEOResult
    analyzed_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert the report to JSON-friendly primitives."""
        def recs(items: list[Recommendation]) -> list[dict]:
            return [r.to_dict() for r in items]

        return {
            'page': asdict(self.page),
            'title': {
                'length': self.title.length,
                'score': self.title.score,
                'recommendations': recs(self.title.recommendations),
            },
            'description': {
                'length': self.description.length,
                'score': self.description.score,
                'recommendations': recs(self.description.recommendations),
            },
            'keywords': {
                'keywords_in_title': self.keywords.keywords_in_title,
                'keywords_in_description': self.keywords.keywords_in_description,
                'score': self.keywords.score,
                'recommendations': recs(self.keywords.recommendations),
            },
            'overall': {
                'score': self.overall.score,
                'rating': self.overall.rating,
                'all_recommendations': recs(self.overall.all_recommendations),
            },
            'analyzed_at': self.analyzed_at.isoformat(),
        }


# ============================================================================
# Lead Models
# ============================================================================

@dataclass(frozen=True)
class ContactSubmissionInput:
    """The contact form fields that feed the lead score."""

    project_type: str = ""
    budget_range: str = ""
    company: str = ""
    phone: str = ""
    message: str = ""


@dataclass
class ContactSubmission:
    """A scored contact form submission as kept in the lead store."""

    id: str
    name: str
    email: str
    message: str
    form_id: str = "general-contact"
    phone: str = ""
    company: str = ""
    project_type: str = ""
    budget: str = ""
    timeline: str = ""
    status: str = "new"  # new/contacted/qualified/proposal/won/lost
    priority: str = "low"  # low/medium/high
    source: str = ""
    lead_score: int = 0
    submitted_at: datetime = field(default_factory=datetime.now)
    last_contacted_at: Optional[datetime] = None
    notes: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['submitted_at'] = self.submitted_at.isoformat()
        if self.last_contacted_at is not None:
            data['last_contacted_at'] = self.last_contacted_at.isoformat()
        return data


# ============================================================================
# Sitemap Models
# ============================================================================

# Dates may be real dates or already-formatted strings
DateLike = Union[date, datetime, str]


@dataclass(frozen=True)
class SitemapEntry:
    """One <url> block of a sitemap."""

    loc: str
    lastmod: Optional[str] = None  # YYYY-MM-DD
    changefreq: Optional[str] = None
    priority: Optional[float] = None  # 0.0-1.0


@dataclass(frozen=True)
class StaticPage:
    """A fixed site page listed in the sitemap."""

    path: str
    priority: float
    changefreq: Optional[str] = None


@dataclass(frozen=True)
class ProjectSource:
    """A portfolio project as listed in the sitemap."""

    id: str
    updated_at: DateLike
    slug: Optional[str] = None


@dataclass(frozen=True)
class BlogPostSource:
    """A blog post as listed in the sitemap. Only False excludes it."""

    id: str
    updated_at: DateLike
    slug: Optional[str] = None
    published: Optional[bool] = None


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 date or datetime string, accepting a trailing 'Z'.

    Raises:
        ValueError: If the string isn't ISO 8601
    """
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def _parse_date(value) -> DateLike:
    """Turn ISO date strings from JSON into datetimes; leave everything else alone."""
    if isinstance(value, str):
        return parse_iso_datetime(value)
    return value


def _pick(item: dict, *keys):
    for key in keys:
        if key in item:
            return item[key]
    return None


def _required(item: dict, *keys):
    for key in keys:
        if key in item:
            return item[key]
    raise KeyError(keys[0])


@dataclass
class SitemapSourceData:
    """Everything the sitemap is built from, in output order."""

    static_pages: list[StaticPage] = field(default_factory=list)
    projects: list[ProjectSource] = field(default_factory=list)
    blog_posts: list[BlogPostSource] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "SitemapSourceData":
        """Build source data from a parsed YAML or JSON document.

        Accepts both snake_case and camelCase keys (``blog_posts`` or
        ``blogPosts``, ``updated_at`` or ``updatedAt``).

        Raises:
            ValueError: If a date string isn't ISO 8601
            KeyError: If a required field is missing
        """
        static_pages = [
            StaticPage(
                path=page['path'],
                priority=page['priority'],
                changefreq=page.get('changefreq'),
            )
            for page in _pick(data, 'static_pages', 'staticPages') or []
        ]
        projects = [
            ProjectSource(
                id=str(project['id']),
                slug=project.get('slug'),
                updated_at=_parse_date(_required(project, 'updated_at', 'updatedAt')),
            )
            for project in _pick(data, 'projects') or []
        ]
        blog_posts = [
            BlogPostSource(
                id=str(post['id']),
                slug=post.get('slug'),
                updated_at=_parse_date(_required(post, 'updated_at', 'updatedAt')),
                published=post.get('published'),
            )
            for post in _pick(data, 'blog_posts', 'blogPosts') or []
        ]
        return cls(static_pages=static_pages, projects=projects, blog_posts=blog_posts)
