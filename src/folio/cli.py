"""Command-line interface for the portfolio lead and SEO toolkit."""

import sys
import json
from pathlib import Path
from typing import Optional

from folio.config import LeadScoringConfig, SEOThresholds, load_data_file, settings
from folio.constants import DEFAULT_FORM_ID, FORM_VARIANTS, LEAD_PRIORITIES, LEAD_STATUSES
from folio.contact import ContactFormData, ContactFormHandler, ContactValidationError
from folio.database import get_db_client
from folio.lead_scoring import LeadScorer, priority_for_score
from folio.logging_config import get_logger, setup_logging
from folio.models import ContactSubmissionInput, SEOPageInput, SEOReport, SitemapSourceData
from folio.output_manager import OutputManager
from folio.seo_analyzer import SEOAnalyzer
from folio.sitemap_generator import SitemapGenerator

logger = get_logger(__name__)

RECOMMENDATION_ICONS = {"success": "✅", "warning": "⚠️ ", "error": "❌"}


def _write_json(data, output_file: Optional[str] = None) -> None:
    """Print JSON or write it to a file."""
    output = json.dumps(data, indent=2, default=str)
    if output_file:
        with open(output_file, "w") as f:
            f.write(output)
        print(f"Results written to {output_file}")
    else:
        print(output)


def print_seo_report(report: SEOReport):
    """Print an SEO report in a formatted way.

    Args:
        report: SEOReport to print
    """
    print(f"\n{'=' * 60}")
    print(f"SEO Analysis for: {report.page.title or '(untitled)'}")
    print(f"{'=' * 60}")
    print(f"\n📊 Overall Score: {report.overall.score}/100 ({report.overall.rating})")
    print(f"\nDetailed Scores:")
    print(f"  • Title ({report.title.length} chars): {report.title.score}/100")
    print(f"  • Description ({report.description.length} chars): {report.description.score}/100")
    print(f"  • Keywords: {report.keywords.score}/100")
    keyword_count = len(report.page.keywords)
    print(f"      in title: {report.keywords.keywords_in_title}/{keyword_count}")
    print(f"      in description: {report.keywords.keywords_in_description}/{keyword_count}")

    if report.overall.all_recommendations:
        print(f"\n💡 Recommendations:")
        for rec in report.overall.all_recommendations:
            icon = RECOMMENDATION_ICONS.get(rec.type.value, "•")
            print(f"  {icon} [{rec.impact.value}] {rec.message}")

    print(f"\n{'=' * 60}\n")


def parse_keywords(value) -> list[str]:
    """Keywords from a comma-separated string or a list; blanks are dropped."""
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(k).strip() for k in value if str(k).strip()]


def score_lead_command(args):
    """Score a single lead from command-line fields."""
    try:
        config = LeadScoringConfig.from_file(args.config) if args.config else None
        scorer = LeadScorer(config)

        submission = ContactSubmissionInput(
            project_type=args.project_type,
            budget_range=args.budget,
            company=args.company,
            phone=args.phone,
            message=args.message,
        )
        score = scorer.score(submission)
        priority = priority_for_score(score)

        if args.output == "json":
            _write_json({"lead_score": score, "priority": priority})
        else:
            print(f"Lead score: {score}/100 (priority: {priority})")

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


def analyze_command(args):
    """Analyze a page title, description and keywords for SEO."""
    try:
        if args.page_file:
            page_data = load_data_file(Path(args.page_file))
            page = SEOPageInput(
                title=page_data.get("title") or "",
                description=page_data.get("description") or "",
                keywords=parse_keywords(page_data.get("keywords")),
            )
        else:
            page = SEOPageInput(
                title=args.title,
                description=args.description,
                keywords=parse_keywords(args.keywords),
            )

        thresholds = SEOThresholds.from_file(args.thresholds) if args.thresholds else SEOThresholds.from_env()
        report = SEOAnalyzer(thresholds).analyze(page)

        if args.output == "json":
            _write_json(report.to_dict(), args.output_file)
        else:
            print_seo_report(report)

        if args.save:
            OutputManager(args.output_dir).save_seo_report(report)

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


def sitemap_command(args):
    """Generate sitemap.xml from a YAML or JSON source file."""
    try:
        if args.source:
            data = SitemapSourceData.from_dict(load_data_file(Path(args.source)))
        else:
            data = SitemapSourceData()

        if args.default_pages or not data.static_pages:
            data.static_pages = SitemapGenerator.default_static_pages()

        generator = SitemapGenerator(args.base_url)
        sitemap = generator.generate_sitemap(data)

        if args.stdout:
            sys.stdout.write(sitemap)
        else:
            path = OutputManager(args.output_dir).save_sitemap(sitemap, args.filename)
            print(f"Sitemap written to {path}")

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


def robots_command(args):
    """Generate robots.txt."""
    try:
        generator = SitemapGenerator(args.base_url)
        robots = generator.generate_robots_txt(
            allow_all=not args.no_allow_all,
            disallowed_paths=args.disallow,
            crawl_delay=args.crawl_delay,
            sitemap_url=args.sitemap_url,
        )

        if args.stdout:
            sys.stdout.write(robots)
        else:
            path = OutputManager(args.output_dir).save_robots_txt(robots, args.filename)
            print(f"robots.txt written to {path}")

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


def leads_command(args):
    """Manage stored leads."""
    try:
        db = get_db_client(args.backend)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)

    try:
        with db:
            if args.leads_action == "submit":
                form = ContactFormData.model_validate(load_data_file(Path(args.file)))
                handler = ContactFormHandler(store=db, form_id=args.form_id, variant=args.variant)
                submission = handler.submit(form)
                print(f"Saved lead {submission.id} (score {submission.lead_score}, priority {submission.priority})")

            elif args.leads_action == "list":
                submissions = db.list_submissions(
                    status=args.status, priority=args.priority, search=args.search
                )
                if args.output == "json":
                    _write_json([s.to_dict() for s in submissions])
                else:
                    if not submissions:
                        print("No leads found.")
                    for s in submissions:
                        print(
                            f"{s.id}  {s.submitted_at:%Y-%m-%d}  {s.lead_score:3d}  "
                            f"{s.priority:<6}  {s.status:<9}  {s.name} <{s.email}>"
                        )

            elif args.leads_action == "stats":
                stats = db.get_conversion_stats()
                if args.output == "json":
                    _write_json(stats)
                else:
                    print(f"Total submissions: {stats['total_submissions']}")
                    print(f"Qualified leads: {stats['qualified_leads']} ({stats['qualification_rate']}%)")
                    print(f"Won deals: {stats['won_deals']} ({stats['conversion_rate']}%)")
                    print(f"Average lead score: {stats['avg_lead_score']}")
                    if stats["top_sources"]:
                        print("\nTop sources:")
                        for entry in stats["top_sources"]:
                            print(f"  • {entry['source'] or '(none)'}: {entry['count']}")
                    if stats["project_type_breakdown"]:
                        print("\nProject types:")
                        for entry in stats["project_type_breakdown"]:
                            print(f"  • {entry['type']}: {entry['count']} (avg score {entry['avg_score']})")
                    print("\nMonthly trend:")
                    for entry in stats["monthly_trends"]:
                        print(f"  {entry['month']}: {entry['submissions']} submitted, {entry['qualified']} qualified")

            elif args.leads_action == "export":
                submissions = db.list_submissions(status=args.status, priority=args.priority)
                path = OutputManager(args.output_dir).export_leads_csv(submissions, args.filename)
                print(f"Exported {len(submissions)} leads to {path}")

            elif args.leads_action == "status":
                submission = db.update_status(args.id, args.new_status)
                if args.note:
                    db.add_note(args.id, args.note)
                print(f"Lead {submission.id} is now '{submission.status}'")

    except ContactValidationError as e:
        print("Error: contact form is invalid")
        for field_name, message in e.errors.items():
            print(f"  • {field_name}: {message}")
        sys.exit(1)
    except KeyError as e:
        print(f"Error: no lead with id {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


def build_parser():
    """Build the argument parser."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Portfolio toolkit - lead scoring, SEO analysis and sitemap generation"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL,
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # score-lead
    score_parser = subparsers.add_parser("score-lead", help="Score a contact submission.")
    score_parser.add_argument("--project-type", default="", help="Project category")
    score_parser.add_argument("--budget", default="", help="Budget bracket label")
    score_parser.add_argument("--company", default="", help="Company name")
    score_parser.add_argument("--phone", default="", help="Phone number")
    score_parser.add_argument("--message", default="", help="Message text")
    score_parser.add_argument("--config", help="YAML or JSON lead scoring point table")
    score_parser.add_argument(
        "--output", "-o", choices=["text", "json"], default="text",
        help="Output format (default: text)",
    )
    score_parser.set_defaults(func=score_lead_command)

    # analyze
    analyze_parser = subparsers.add_parser(
        "analyze", help="Score a page title, description and keywords."
    )
    analyze_parser.add_argument("--title", default="", help="Page title")
    analyze_parser.add_argument("--description", default="", help="Meta description")
    analyze_parser.add_argument("--keywords", default="", help="Comma-separated keywords")
    analyze_parser.add_argument(
        "--page-file", help="YAML or JSON file with title, description and keywords"
    )
    analyze_parser.add_argument("--thresholds", help="YAML or JSON thresholds file")
    analyze_parser.add_argument(
        "--output", "-o", choices=["text", "json"], default="text",
        help="Output format (default: text)",
    )
    analyze_parser.add_argument(
        "--output-file", "-f", help="Write output to file (only for json format)",
    )
    analyze_parser.add_argument(
        "--save", action="store_true", help="Also save the report to the output directory",
    )
    analyze_parser.add_argument(
        "--output-dir", default=settings.OUTPUT_DIR, help="Directory for saved reports",
    )
    analyze_parser.set_defaults(func=analyze_command)

    # sitemap
    sitemap_parser = subparsers.add_parser("sitemap", help="Generate sitemap.xml.")
    sitemap_parser.add_argument(
        "--source", help="YAML or JSON file with static_pages, projects and blog_posts",
    )
    sitemap_parser.add_argument("--base-url", default=settings.SITE_BASE_URL, help="Site base URL")
    sitemap_parser.add_argument(
        "--default-pages", action="store_true",
        help="Use the default static pages (also used when the source has none)",
    )
    sitemap_parser.add_argument("--output-dir", default=settings.OUTPUT_DIR, help="Output directory")
    sitemap_parser.add_argument("--filename", default="sitemap.xml", help="Output file name")
    sitemap_parser.add_argument("--stdout", action="store_true", help="Print instead of writing a file")
    sitemap_parser.set_defaults(func=sitemap_command)

    # robots
    robots_parser = subparsers.add_parser("robots", help="Generate robots.txt.")
    robots_parser.add_argument("--base-url", default=settings.SITE_BASE_URL, help="Site base URL")
    robots_parser.add_argument(
        "--disallow", action="append", help="Path to disallow (repeatable; default: /admin, /api)",
    )
    robots_parser.add_argument("--no-allow-all", action="store_true", help="Omit 'Allow: /'")
    robots_parser.add_argument("--crawl-delay", type=int, help="Crawl-delay in seconds")
    robots_parser.add_argument("--sitemap-url", help="Sitemap URL (default: <base-url>/sitemap.xml)")
    robots_parser.add_argument("--output-dir", default=settings.OUTPUT_DIR, help="Output directory")
    robots_parser.add_argument("--filename", default="robots.txt", help="Output file name")
    robots_parser.add_argument("--stdout", action="store_true", help="Print instead of writing a file")
    robots_parser.set_defaults(func=robots_command)

    # leads
    leads_parser = subparsers.add_parser("leads", help="Manage stored leads.")
    leads_parser.add_argument(
        "--backend", choices=["local", "turso"], default=None,
        help="Lead store backend (default: DB_BACKEND setting)",
    )
    leads_sub = leads_parser.add_subparsers(dest="leads_action", required=True)

    submit_parser = leads_sub.add_parser("submit", help="Validate, score and store a contact form.")
    submit_parser.add_argument("file", help="YAML or JSON file with the form fields")
    submit_parser.add_argument("--form-id", default=DEFAULT_FORM_ID, help="Form identifier")
    submit_parser.add_argument(
        "--variant", choices=FORM_VARIANTS, default="default",
        help="Form variant used for validation",
    )

    list_parser = leads_sub.add_parser("list", help="List leads, newest first.")
    list_parser.add_argument("--status", help="Filter by status")
    list_parser.add_argument("--priority", choices=LEAD_PRIORITIES, help="Filter by priority")
    list_parser.add_argument("--search", help="Search name, email or company")
    list_parser.add_argument(
        "--output", "-o", choices=["text", "json"], default="text",
        help="Output format (default: text)",
    )

    stats_parser = leads_sub.add_parser("stats", help="Show conversion statistics.")
    stats_parser.add_argument(
        "--output", "-o", choices=["text", "json"], default="text",
        help="Output format (default: text)",
    )

    export_parser = leads_sub.add_parser("export", help="Export leads to CSV.")
    export_parser.add_argument("--status", help="Filter by status")
    export_parser.add_argument("--priority", choices=LEAD_PRIORITIES, help="Filter by priority")
    export_parser.add_argument("--output-dir", default=settings.OUTPUT_DIR, help="Output directory")
    export_parser.add_argument("--filename", help="Output file name (default: leads-export-<date>.csv)")

    status_parser = leads_sub.add_parser("status", help="Update a lead's pipeline status.")
    status_parser.add_argument("id", help="Lead id")
    status_parser.add_argument("new_status", choices=LEAD_STATUSES, help="New pipeline status")
    status_parser.add_argument("--note", help="Note to attach")

    leads_parser.set_defaults(func=leads_command)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        logger.debug(f"Running command: {args.command}")
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
