"""Heuristic SEO scoring for page titles, meta descriptions and keywords."""

import logging
import math
from typing import Optional, Sequence

from folio.config import SEOThresholds, default_thresholds
from folio.constants import LOWEST_RATING, RATING_THRESHOLDS
from folio.models import (
    DescriptionAnalysis,
    Impact,
    KeywordAnalysis,
    OverallSEOResult,
    Recommendation,
    RecommendationType,
    SEOPageInput,
    SEOReport,
    TitleAnalysis,
)

logger = logging.getLogger(__name__)


def count_keywords_in(keywords: Sequence[str], text: str) -> int:
    """Count keywords that appear in text, case-insensitively.

    Repeated keywords are counted each time they appear in the list.
    """
    text_lower = text.lower()
    return sum(1 for keyword in keywords if keyword.lower() in text_lower)


def rating_for_score(score: int) -> str:
    """Map an overall score to its rating label."""
    for minimum, rating in RATING_THRESHOLDS:
        if score >= minimum:
            return rating
    return LOWEST_RATING


class SEOAnalyzer:
    """Scores the title, description and keywords of a page.

    Each analyzer returns a 0-100 score with recommendations explaining it.
    All methods are pure and accept empty strings and lists.
    """

    def __init__(self, thresholds: Optional[SEOThresholds] = None):
        """Initialize analyzer with configurable thresholds.

        Args:
            thresholds: SEO thresholds and weights
        """
        self.thresholds = thresholds or default_thresholds

    def analyze_title(self, title: str) -> TitleAnalysis:
        """Analyze page title length.

        Args:
            title: Page title

        Returns:
            TitleAnalysis with exactly one recommendation
        """
        t = self.thresholds
        length = len(title)

        if length < t.title_min:
            score = t.title_short_score
            recommendation = Recommendation(
                type=RecommendationType.WARNING,
                message="Title is too short. Consider adding more descriptive keywords.",
                impact=Impact.MEDIUM,
            )
        elif length > t.title_max:
            score = t.title_long_score
            recommendation = Recommendation(
                type=RecommendationType.ERROR,
                message="Title is too long and may be truncated in search results.",
                impact=Impact.HIGH,
            )
        else:
            score = t.optimal_score
            recommendation = Recommendation(
                type=RecommendationType.SUCCESS,
                message="Title length is optimal for search engines.",
                impact=Impact.LOW,
            )

        return TitleAnalysis(length=length, score=score, recommendations=[recommendation])

    def analyze_description(self, description: str) -> DescriptionAnalysis:
        """Analyze meta description length.

        Args:
            description: Meta description

        Returns:
            DescriptionAnalysis with exactly one recommendation
        """
        t = self.thresholds
        length = len(description)

        if length < t.description_min:
            score = t.description_short_score
            recommendation = Recommendation(
                type=RecommendationType.WARNING,
                message="Description is too short. Add more details to improve click-through rates.",
                impact=Impact.MEDIUM,
            )
        elif length > t.description_max:
            score = t.description_long_score
            recommendation = Recommendation(
                type=RecommendationType.ERROR,
                message="Description is too long and may be truncated in search results.",
                impact=Impact.HIGH,
            )
        else:
            score = t.optimal_score
            recommendation = Recommendation(
                type=RecommendationType.SUCCESS,
                message="Description length is optimal for search engines.",
                impact=Impact.LOW,
            )

        return DescriptionAnalysis(length=length, score=score, recommendations=[recommendation])

    def analyze_keywords(
        self, keywords: Sequence[str], title: str, description: str
    ) -> KeywordAnalysis:
        """Analyze the keyword list and check it against title and description.

        Args:
            keywords: Target keywords (duplicates are not removed)
            title: Page title
            description: Meta description

        Returns:
            KeywordAnalysis with zero to three recommendations
        """
        t = self.thresholds
        count = len(keywords)
        recommendations = []

        if count == 0:
            recommendations.append(Recommendation(
                type=RecommendationType.WARNING,
                message="No keywords specified. Add relevant keywords for better SEO.",
                impact=Impact.MEDIUM,
            ))
        elif count > t.max_keywords:
            recommendations.append(Recommendation(
                type=RecommendationType.WARNING,
                message="Too many keywords. Focus on 5-10 most relevant keywords.",
                impact=Impact.LOW,
            ))

        in_title = count_keywords_in(keywords, title)
        in_description = count_keywords_in(keywords, description)

        if in_title == 0 and count > 0:
            recommendations.append(Recommendation(
                type=RecommendationType.ERROR,
                message="None of your keywords appear in the title. Include primary keywords in the title.",
                impact=Impact.HIGH,
            ))

        if in_description == 0 and count > 0:
            recommendations.append(Recommendation(
                type=RecommendationType.WARNING,
                message=(
                    "None of your keywords appear in the description. "
                    "Include keywords naturally in the description."
                ),
                impact=Impact.MEDIUM,
            ))

        if count == 0:
            score = t.no_keywords_score
        else:
            score = (
                (t.keywords_in_title_points if in_title > 0 else 0)
                + (t.keywords_in_description_points if in_description > 0 else 0)
                + (t.focused_keywords_points if count <= t.max_keywords else t.excess_keywords_points)
            )

        return KeywordAnalysis(
            keywords_in_title=in_title,
            keywords_in_description=in_description,
            score=min(score, t.optimal_score),
            recommendations=recommendations,
        )

    def calculate_overall_score(
        self,
        title_analysis: TitleAnalysis,
        description_analysis: DescriptionAnalysis,
        keywords_analysis: KeywordAnalysis,
    ) -> OverallSEOResult:
        """Combine sub-scores into a weighted overall score and rating.

        Halves round up. Recommendations are concatenated title first, then
        description, then keywords, without sorting or de-duplication.
        """
        t = self.thresholds
        weighted = (
            title_analysis.score * t.title_weight
            + description_analysis.score * t.description_weight
            + keywords_analysis.score * t.keywords_weight
        )
        score = math.floor(weighted + 0.5)

        return OverallSEOResult(
            score=score,
            rating=rating_for_score(score),
            all_recommendations=[
                *title_analysis.recommendations,
                *description_analysis.recommendations,
                *keywords_analysis.recommendations,
            ],
        )

    def analyze(self, page: SEOPageInput) -> SEOReport:
        """Run every analyzer on a page and combine the results.

        Args:
            page: Title, description and keywords to score

        Returns:
            SEOReport with each sub-analysis and the overall result
        """
        title = self.analyze_title(page.title)
        description = self.analyze_description(page.description)
        keywords = self.analyze_keywords(page.keywords, page.title, page.description)
        overall = self.calculate_overall_score(title, description, keywords)

        logger.debug(
            f"SEO score {overall.score} ({overall.rating}): "
            f"title={title.score} description={description.score} keywords={keywords.score}"
        )

        return SEOReport(
            page=page,
            title=title,
            description=description,
            keywords=keywords,
            overall=overall,
        )
