"""Point-based lead scoring for inbound contact submissions."""

import logging
from typing import Optional

from folio.config import LeadScoringConfig, default_lead_scoring
from folio.constants import HIGH_PRIORITY_MIN_SCORE, MEDIUM_PRIORITY_MIN_SCORE
from folio.models import ContactSubmissionInput

logger = logging.getLogger(__name__)


def project_type_points(project_type: Optional[str], config: LeadScoringConfig = default_lead_scoring) -> int:
    """Points for the project category. Exact match, high-value list checked first."""
    project_type = project_type or ""
    if project_type in config.high_value_projects:
        return config.high_value_points
    if project_type in config.medium_value_projects:
        return config.medium_value_points
    return config.default_project_points


def budget_points(budget_range: Optional[str], config: LeadScoringConfig = default_lead_scoring) -> int:
    """Points for the budget bracket.

    Tiers are matched by substring in order; the first tier with any marker
    present in the label wins. Labels matching no tier, including empty
    ones, get the default points.
    """
    budget_range = budget_range or ""
    for tier in config.budget_tiers:
        if any(marker in budget_range for marker in tier.markers):
            return tier.points
    return config.default_budget_points


def contact_detail_points(
    company: Optional[str],
    phone: Optional[str],
    config: LeadScoringConfig = default_lead_scoring,
) -> int:
    """Points for filling in company and phone. Whitespace-only counts as empty."""
    points = 0
    if (company or "").strip():
        points += config.company_points
    if (phone or "").strip():
        points += config.phone_points
    return points


def message_points(message: Optional[str], config: LeadScoringConfig = default_lead_scoring) -> int:
    """Bonus for a detailed message (untrimmed length)."""
    if len(message or "") > config.detailed_message_length:
        return config.detailed_message_points
    return 0


def priority_for_score(score: int) -> str:
    """Map a lead score to the submission priority bucket."""
    if score >= HIGH_PRIORITY_MIN_SCORE:
        return "high"
    if score >= MEDIUM_PRIORITY_MIN_SCORE:
        return "medium"
    return "low"


class LeadScorer:
    """Scores contact submissions from 0 to 100.

    The score is the sum of the project type, budget, contact detail and
    message buckets, capped at ``config.max_score``. Scoring never raises;
    missing fields (``None`` or empty) fall into the lowest bucket.
    """

    def __init__(self, config: Optional[LeadScoringConfig] = None):
        self.config = config or default_lead_scoring

    def score(self, submission: ContactSubmissionInput) -> int:
        """Compute the lead score for a submission.

        Args:
            submission: The scored contact form fields

        Returns:
            Integer score, at most config.max_score
        """
        total = (
            project_type_points(submission.project_type, self.config)
            + budget_points(submission.budget_range, self.config)
            + contact_detail_points(submission.company, submission.phone, self.config)
            + message_points(submission.message, self.config)
        )
        score = min(total, self.config.max_score)
        logger.debug(f"Lead score {score} (raw {total}) for project type {submission.project_type!r}")
        return score

    def score_with_priority(self, submission: ContactSubmissionInput) -> tuple[int, str]:
        """Score a submission and derive its priority.

        Returns:
            Tuple of (score, priority)
        """
        score = self.score(submission)
        return score, priority_for_score(score)
