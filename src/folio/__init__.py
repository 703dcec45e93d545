"""Lead scoring, SEO analysis and sitemap generation for a portfolio site."""

__version__ = "0.1.0"

from folio.lead_scoring import LeadScorer, priority_for_score
from folio.seo_analyzer import SEOAnalyzer
from folio.sitemap_generator import SitemapGenerator
from folio.contact import (
    ContactFormData,
    ContactFormHandler,
    ContactValidationError,
    build_submission,
    validate_form,
)
from folio.database import (
    AbstractLeadStore,
    LocalSqliteLeadStore,
    TursoLeadStore,
    get_db_client,
)
from folio.output_manager import OutputManager
from folio.models import (
    ContactSubmissionInput,
    ContactSubmission,
    SEOPageInput,
    Recommendation,
    RecommendationType,
    Impact,
    TitleAnalysis,
    DescriptionAnalysis,
    KeywordAnalysis,
    OverallSEOResult,
    SEOReport,
    SitemapEntry,
    SitemapSourceData,
    StaticPage,
    ProjectSource,
    BlogPostSource,
)
from folio.config import settings, SEOThresholds, LeadScoringConfig

__all__ = [
    # Core
    "LeadScorer",
    "priority_for_score",
    "SEOAnalyzer",
    "SitemapGenerator",
    # Contact & leads
    "ContactFormData",
    "ContactFormHandler",
    "ContactValidationError",
    "build_submission",
    "validate_form",
    "AbstractLeadStore",
    "LocalSqliteLeadStore",
    "TursoLeadStore",
    "get_db_client",
    "OutputManager",
    # Models
    "ContactSubmissionInput",
    "ContactSubmission",
    "SEOPageInput",
    "Recommendation",
    "RecommendationType",
    "Impact",
    "TitleAnalysis",
    "DescriptionAnalysis",
    "KeywordAnalysis",
    "OverallSEOResult",
    "SEOReport",
    "SitemapEntry",
    "SitemapSourceData",
    "StaticPage",
    "ProjectSource",
    "BlogPostSource",
    # Config
    "settings",
    "SEOThresholds",
    "LeadScoringConfig",
]
