"""Output manager for writing generated site files and exports to disk."""

import csv
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional

from folio.constants import (
    DEFAULT_ROBOTS_FILENAME,
    DEFAULT_SEO_REPORT_FILENAME,
    DEFAULT_SITEMAP_FILENAME,
    LEAD_EXPORT_COLUMNS,
)
from folio.models import ContactSubmission, SEOReport

logger = logging.getLogger(__name__)


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime objects."""

    def default(self, obj):
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


class OutputManager:
    """Writes sitemap.xml, robots.txt, SEO reports and lead exports.

    Every save method returns the path it wrote.
    """

    def __init__(self, base_output_dir: str = "public"):
        """Initialize output manager.

        Args:
            base_output_dir: Directory all files are written to
        """
        self.base_output_dir = Path(base_output_dir)
        self.base_output_dir.mkdir(parents=True, exist_ok=True)

    def save_sitemap(self, content: str, filename: str = DEFAULT_SITEMAP_FILENAME) -> Path:
        """Save a generated sitemap."""
        return self._save_text(self.base_output_dir / filename, content)

    def save_robots_txt(self, content: str, filename: str = DEFAULT_ROBOTS_FILENAME) -> Path:
        """Save a generated robots.txt."""
        return self._save_text(self.base_output_dir / filename, content)

    def save_seo_report(self, report: SEOReport, filename: str = DEFAULT_SEO_REPORT_FILENAME) -> Path:
        """Save an SEO report as JSON."""
        filepath = self.base_output_dir / filename
        self._save_json(filepath, report.to_dict())
        logger.info(f"SEO report saved to {filepath}")
        return filepath

    def export_leads_csv(
        self,
        submissions: Iterable[ContactSubmission],
        filename: Optional[str] = None,
    ) -> Path:
        """Export submissions to CSV.

        Args:
            submissions: Leads to export, in the order given
            filename: Output file name (defaults to leads-export-YYYY-MM-DD.csv)

        Returns:
            Path to the CSV file
        """
        if filename is None:
            filename = f"leads-export-{date.today().isoformat()}.csv"
        filepath = self.base_output_dir / filename

        count = 0
        with open(filepath, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(LEAD_EXPORT_COLUMNS)
            for submission in submissions:
                writer.writerow([
                    submission.name,
                    submission.email,
                    submission.phone,
                    submission.company,
                    submission.project_type,
                    submission.budget,
                    submission.status,
                    submission.priority,
                    submission.lead_score,
                    submission.submitted_at.date().isoformat(),
                ])
                count += 1

        logger.info(f"Exported {count} leads to {filepath}")
        return filepath

    def _save_text(self, filepath: Path, content: str) -> Path:
        """Save text content as UTF-8.

        Args:
            filepath: Path to save to
            content: Text to save
        """
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
        logger.info(f"Wrote {filepath}")
        return filepath

    def _save_json(self, filepath: Path, data: dict) -> None:
        """Save data as formatted JSON.

        Args:
            filepath: Path to save to
            data: Data to save
        """
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, cls=DateTimeEncoder)
