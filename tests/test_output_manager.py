# tests/test_output_manager.py
"""Tests for writing generated files and exports."""

import csv
import json
from datetime import date, datetime

import pytest
from folio.models import ContactSubmission, SEOPageInput
from folio.output_manager import OutputManager
from folio.seo_analyzer import SEOAnalyzer


@pytest.fixture
def manager(tmp_path):
    """Create an OutputManager writing into a temporary directory."""
    return OutputManager(str(tmp_path / "public"))


def test_creates_output_directory(tmp_path):
    """Test that the output directory is created."""
    OutputManager(str(tmp_path / "nested" / "public"))
    assert (tmp_path / "nested" / "public").is_dir()


def test_save_sitemap_and_robots(manager):
    """Test that text files are written verbatim."""
    sitemap_path = manager.save_sitemap("<urlset/>\n")
    robots_path = manager.save_robots_txt("User-agent: *\n")

    assert sitemap_path.name == "sitemap.xml"
    assert sitemap_path.read_text(encoding="utf-8") == "<urlset/>\n"
    assert robots_path.name == "robots.txt"
    assert robots_path.read_text(encoding="utf-8") == "User-agent: *\n"


def test_save_seo_report(manager):
    """Test that the report is written as JSON."""
    report = SEOAnalyzer().analyze(SEOPageInput(title="Home", keywords=["home"]))

    path = manager.save_seo_report(report)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert path.name == "seo_report.json"
    assert data["overall"]["score"] == report.overall.score
    assert data["page"]["title"] == "Home"


def test_export_leads_csv(manager):
    """Test the CSV header, row values and quoting."""
    submissions = [
        ContactSubmission(
            id="lead-1",
            name="Jane Doe",
            email="jane@example.com",
            message="Hello there, world",
            company="Acme, Inc.",
            project_type="Custom Software",
            budget="Over $50,000",
            status="qualified",
            priority="high",
            lead_score=85,
            submitted_at=datetime(2024, 5, 1, 9, 30, 0),
        ),
        ContactSubmission(
            id="lead-2",
            name="Bob",
            email="bob@example.com",
            message="Quick question",
            submitted_at=datetime(2024, 4, 30, 18, 0, 0),
        ),
    ]

    path = manager.export_leads_csv(submissions, "leads.csv")

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))

    assert rows[0] == [
        "Name", "Email", "Phone", "Company", "Project Type", "Budget",
        "Status", "Priority", "Lead Score", "Submitted Date",
    ]
    assert rows[1] == [
        "Jane Doe", "jane@example.com", "", "Acme, Inc.", "Custom Software",
        "Over $50,000", "qualified", "high", "85", "2024-05-01",
    ]
    assert rows[2][0] == "Bob"
    assert rows[2][-1] == "2024-04-30"
    assert len(rows) == 3


def test_export_leads_csv_default_filename(manager):
    """Test the dated default file name."""
    path = manager.export_leads_csv([])
    assert path.name == f"leads-export-{date.today().isoformat()}.csv"
    assert path.read_text(encoding="utf-8").startswith("Name,Email,")
