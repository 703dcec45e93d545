"""Contact form validation, lead enrichment and submission."""

import logging
import re
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from folio.constants import (
    DEFAULT_FORM_ID,
    DEFAULT_SUBMISSION_SOURCE,
    EMAIL_PATTERN,
    HIGH_BUDGET_MIN_POINTS,
    MIN_MESSAGE_LENGTH,
    MIN_NAME_LENGTH,
    PHONE_FORMATTING_CHARS,
    PHONE_PATTERN,
)
from folio.lead_scoring import LeadScorer, budget_points
from folio.models import ContactSubmission, ContactSubmissionInput

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_PHONE_RE = re.compile(PHONE_PATTERN)
_PHONE_FORMATTING_RE = re.compile(PHONE_FORMATTING_CHARS)
_TAG_SEPARATOR_RE = re.compile(r"[^a-z0-9-]+")


class ContactValidationError(ValueError):
    """Raised when a contact form fails validation."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid contact form fields: {fields}")


class ContactFormData(BaseModel):
    """
    Contact form fields as submitted.

    Absent fields (missing or None) become empty strings so that scoring and
    validation only ever see text. camelCase keys from the web form
    (``projectType``) are accepted alongside snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", description="Contact name")
    email: str = Field(default="", description="Reply-to email address")
    phone: str = Field(default="", description="Optional phone number")
    company: str = Field(default="", description="Optional company name")
    project_type: str = Field(default="", alias="projectType", description="Project category")
    budget: str = Field(default="", description="Budget bracket label")
    timeline: str = Field(default="", description="Desired timeline")
    message: str = Field(default="", description="Free-text message")

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    def to_scoring_input(self) -> ContactSubmissionInput:
        """Extract the fields the lead score is computed from."""
        return ContactSubmissionInput(
            project_type=self.project_type,
            budget_range=self.budget,
            company=self.company,
            phone=self.phone,
            message=self.message,
        )


def validate_field(name: str, value: str, variant: str = "default") -> Optional[str]:
    """Validate a single form field.

    Args:
        name: Field name (snake_case)
        value: Submitted value
        variant: Form variant; 'minimal' forms don't require a project type

    Returns:
        Error message, or None if the value is valid
    """
    value = value or ""

    if name == "name":
        if not value.strip():
            return "Name is required"
        if len(value.strip()) < MIN_NAME_LENGTH:
            return f"Name must be at least {MIN_NAME_LENGTH} characters"
        return None

    if name == "email":
        if not value.strip():
            return "Email is required"
        if not _EMAIL_RE.fullmatch(value):
            return "Please enter a valid email address"
        return None

    if name == "phone":
        if value and not _PHONE_RE.fullmatch(_PHONE_FORMATTING_RE.sub("", value)):
            return "Please enter a valid phone number"
        return None

    if name == "project_type":
        if variant != "minimal" and not value:
            return "Please select a project type"
        return None

    if name == "message":
        if not value.strip():
            return "Message is required"
        if len(value.strip()) < MIN_MESSAGE_LENGTH:
            return f"Message must be at least {MIN_MESSAGE_LENGTH} characters"
        return None

    return None


def validate_form(form: ContactFormData, variant: str = "default") -> dict[str, str]:
    """Validate every field of a form.

    Returns:
        Mapping of field name to error message; empty when the form is valid
    """
    errors = {}
    for field_name in ContactFormData.model_fields:
        error = validate_field(field_name, getattr(form, field_name), variant)
        if error:
            errors[field_name] = error
    return errors


def derive_tags(
    project_type: Optional[str],
    budget: Optional[str],
    priority: str,
    scorer: Optional[LeadScorer] = None,
) -> list[str]:
    """Tag a lead by project kind, budget and urgency.

    "E-commerce Platform" with "$10,000 - $25,000" at high priority gives
    ["e-commerce", "high-budget", "urgent"].
    """
    scorer = scorer or LeadScorer()
    tags = []

    words = (project_type or "").split()
    if words:
        project_tag = _TAG_SEPARATOR_RE.sub("-", words[0].lower()).strip("-")
        if project_tag:
            tags.append(project_tag)

    if budget_points(budget, scorer.config) >= HIGH_BUDGET_MIN_POINTS:
        tags.append("high-budget")
    if priority == "high":
        tags.append("urgent")

    return tags


def build_submission(
    form: ContactFormData,
    form_id: str = DEFAULT_FORM_ID,
    scorer: Optional[LeadScorer] = None,
    now: Optional[datetime] = None,
) -> ContactSubmission:
    """Score a form and shape it into a new lead.

    Args:
        form: Validated form data
        form_id: Identifier of the form that was submitted
        scorer: Lead scorer (defaults to the standard point table)
        now: Submission time (defaults to now)

    Returns:
        ContactSubmission with status 'new', a priority from its score and
        derived tags
    """
    scorer = scorer or LeadScorer()
    score, priority = scorer.score_with_priority(form.to_scoring_input())

    return ContactSubmission(
        id=uuid.uuid4().hex,
        form_id=form_id,
        name=form.name,
        email=form.email,
        phone=form.phone,
        company=form.company,
        project_type=form.project_type,
        budget=form.budget,
        timeline=form.timeline,
        message=form.message,
        status="new",
        priority=priority,
        source=DEFAULT_SUBMISSION_SOURCE,
        lead_score=score,
        tags=derive_tags(form.project_type, form.budget, priority, scorer),
        submitted_at=now or datetime.now(),
    )


class ContactFormHandler:
    """Validates, scores and stores contact form submissions."""

    def __init__(
        self,
        store=None,
        scorer: Optional[LeadScorer] = None,
        form_id: str = DEFAULT_FORM_ID,
        variant: str = "default",
    ):
        """
        Args:
            store: Lead store to persist submissions to (None skips saving)
            scorer: Lead scorer
            form_id: Identifier recorded on each submission
            variant: Form variant used for validation
        """
        self.store = store
        self.scorer = scorer or LeadScorer()
        self.form_id = form_id
        self.variant = variant

    def submit(self, form: ContactFormData) -> ContactSubmission:
        """Validate and record a submission.

        Raises:
            ContactValidationError: If any field is invalid
        """
        errors = validate_form(form, self.variant)
        if errors:
            logger.info(f"Rejected contact form {self.form_id}: {', '.join(sorted(errors))}")
            raise ContactValidationError(errors)

        submission = build_submission(form, form_id=self.form_id, scorer=self.scorer)

        if self.store is not None:
            self.store.save_submission(submission)

        logger.info(
            f"Contact form submitted: {submission.id} "
            f"(score {submission.lead_score}, priority {submission.priority})"
        )
        return submission
