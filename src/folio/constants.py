# src/folio/constants.py
"""Centralized constants for the portfolio toolkit.

This module contains catalogs and fixed values that are used across
multiple modules. For user-configurable thresholds and point values, see
config.py (SEOThresholds and LeadScoringConfig).
"""

# =============================================================================
# Contact Form Catalogs
# =============================================================================

PROJECT_TYPES = (
    "Website Development",
    "Mobile App Development",
    "E-commerce Platform",
    "Custom Software",
    "API Development",
    "UI/UX Design",
    "Consultation",
    "Maintenance & Support",
    "Other",
)

BUDGET_RANGES = (
    "Under $2,000",
    "$2,000 - $5,000",
    "$5,000 - $10,000",
    "$10,000 - $25,000",
    "$25,000 - $50,000",
    "Over $50,000",
    "Let's discuss",
)

TIMELINE_OPTIONS = (
    "ASAP",
    "2-4 weeks",
    "1-2 months",
    "3-4 months",
    "6+ months",
    "Flexible",
)

# Form variants; 'minimal' forms don't ask for a project type
FORM_VARIANTS = ("default", "minimal", "detailed")

DEFAULT_FORM_ID = "general-contact"
DEFAULT_SUBMISSION_SOURCE = "Portfolio Contact Form"

MIN_NAME_LENGTH = 2
MIN_MESSAGE_LENGTH = 10

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"
# Characters stripped from phone numbers before pattern matching
PHONE_FORMATTING_CHARS = r"[-\s()]"


# =============================================================================
# Lead Management Constants
# =============================================================================

LEAD_STATUSES = ("new", "contacted", "qualified", "proposal", "won", "lost")

# Statuses counted as qualified in conversion stats
QUALIFIED_STATUSES = ("qualified", "proposal", "won")

LEAD_PRIORITIES = ("low", "medium", "high")

# Conversion stats: sources listed and months of trend history
TOP_SOURCES_LIMIT = 5
TREND_MONTHS = 6

# Score at or above which a lead is high / medium priority
HIGH_PRIORITY_MIN_SCORE = 70
MEDIUM_PRIORITY_MIN_SCORE = 50

# Budget points at or above which a lead is tagged high-budget
HIGH_BUDGET_MIN_POINTS = 30

LEAD_EXPORT_COLUMNS = (
    "Name",
    "Email",
    "Phone",
    "Company",
    "Project Type",
    "Budget",
    "Status",
    "Priority",
    "Lead Score",
    "Submitted Date",
)


# =============================================================================
# SEO Rating Constants
# =============================================================================

# Minimum overall score for each rating, checked top to bottom
RATING_THRESHOLDS = (
    (90, "excellent"),
    (70, "good"),
    (50, "fair"),
)
LOWEST_RATING = "poor"


# =============================================================================
# Sitemap Constants
# =============================================================================

DEFAULT_BASE_URL = "https://yourportfolio.com"

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

PROJECT_CHANGEFREQ = "monthly"
PROJECT_PRIORITY = 0.8
BLOG_POST_CHANGEFREQ = "monthly"
BLOG_POST_PRIORITY = 0.7

DEFAULT_DISALLOWED_PATHS = ("/admin", "/api")

DEFAULT_SITEMAP_FILENAME = "sitemap.xml"
DEFAULT_ROBOTS_FILENAME = "robots.txt"
DEFAULT_SEO_REPORT_FILENAME = "seo_report.json"
