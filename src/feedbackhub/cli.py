"""Command-line interface for FeedbackHub."""

import argparse
import logging
import sys

from .core.config import settings
from .core.constants import FileConstants, SourceConstants
from .core.errors import ConfigurationError
from .core.models import FeedbackQuery
from .pipeline import build_pipeline
from .services.storage import DiskCacheStorage, FileStorage
from .utils.data_prep import export_to_json, load_report, prepare_export

logger = logging.getLogger(__name__)

SOURCE_FLAGS = [
    ("google_play", SourceConstants.GOOGLE_PLAY, "Google Play app id"),
    ("app_store", SourceConstants.APP_STORE, "App Store app id"),
    ("google_reviews", SourceConstants.GOOGLE_REVIEWS, "Google Maps business search query"),
    ("trustpilot", SourceConstants.TRUSTPILOT, "Trustpilot company domain"),
    ("glassdoor", SourceConstants.GLASSDOOR, "Glassdoor company name"),
    ("reddit", SourceConstants.REDDIT, "Reddit search query"),
]


def setup_logging():
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=FileConstants.LOG_FORMAT,
    )


def build_query(args) -> FeedbackQuery:
    identifiers = {}
    for dest, source, _ in SOURCE_FLAGS:
        value = getattr(args, dest)
        if value:
            identifiers[source] = value
    return FeedbackQuery(
        sources=list(identifiers),
        identifiers=identifiers,
        limit=args.limit,
        time_range_days=args.days,
    )


def print_report(report):
    summary = report.summary
    print(f"\n📊 {summary.total_feedback} feedback items, health score {summary.health_score}/100")
    if summary.average_rating is not None:
        print(f"⭐ Average rating: {summary.average_rating}")
    print(f"✅ Real data sources: {', '.join(summary.real_data_sources) or 'none'}")
    print(f"📦 Mock data sources: {', '.join(summary.mock_data_sources) or 'none'}")
    print(f"Real data: {summary.real_data_percentage}% of sources, {summary.real_reviews_percentage}% of items")

    breakdown = summary.sentiment_breakdown
    print(f"Sentiment: {breakdown.positive} positive, {breakdown.negative} negative, "
          f"{breakdown.neutral} neutral, {breakdown.mixed} mixed")

    if report.issues:
        print("\nTop issues:")
        for issue in report.issues[:5]:
            print(f"  - {issue.category}: {issue.count}")

    if report.insights:
        print("\nInsights:")
        for i, insight in enumerate(report.insights, 1):
            print(f"{i}. [{insight.type.value.upper()}] {insight.title} (confidence {insight.confidence:.0%})")
            print(f"   {insight.description}")
            print(f"   ➡️  {insight.recommendation}")

    if report.recommendations:
        print("\nRecommendations:")
        for action in report.recommendations:
            print(f"  P{action.priority} [{action.effort}, {action.timeline}] {action.action}")


def cmd_analyze(args):
    """Collect feedback and analyze it."""
    query = build_query(args)
    if not query.sources:
        raise ConfigurationError("Pass at least one source, e.g. --app-store 123456789")

    run_settings = settings.model_copy(update={
        key: value for key, value in {
            "synthetic_seed": args.seed,
            "fallback_on_empty": False if args.no_empty_fallback else None,
            "rating_rule": args.rating_rule,
        }.items() if value is not None
    })

    if args.cache:
        raw_store = DiskCacheStorage(run_settings.cache_dir)
    else:
        raw_store = FileStorage(run_settings.output_dir)

    pipeline = build_pipeline(run_settings, query, raw_store=raw_store, sink=raw_store if args.keep_feed else None)
    print(f"Analyzing {len(query.sources)} sources with limit {query.limit}...")
    report = pipeline.run(query)
    print_report(report)

    if args.out:
        export_to_json(prepare_export(report, query, pipeline.last_orchestration), args.out)
        print(f"\nReport saved to {args.out}")


def cmd_show(args):
    """Print a saved report."""
    report = load_report(args.input_file)
    print_report(report)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="FeedbackHub - Feedback Collection & Correlation")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Collect and analyze feedback')
    for dest, _, help_text in SOURCE_FLAGS:
        analyze_parser.add_argument(f"--{dest.replace('_', '-')}", dest=dest, help=help_text)
    analyze_parser.add_argument('--limit', type=int, default=settings.default_limit, help='Items per source')
    analyze_parser.add_argument('--days', type=int, help='Only keep feedback from the last N days')
    analyze_parser.add_argument('--seed', type=int, help='Seed for reproducible synthetic fallback data')
    analyze_parser.add_argument('--rating-rule', choices=['threshold', 'banded'], help='Rating to sentiment rule')
    analyze_parser.add_argument('--no-empty-fallback', action='store_true',
                                help='Keep empty sources empty instead of substituting synthetic data')
    analyze_parser.add_argument('--cache', action='store_true', help='Archive raw payloads in the disk cache')
    analyze_parser.add_argument('--keep-feed', action='store_true', help='Also archive the annotated feed')
    analyze_parser.add_argument('--out', help='Output JSON file')

    # Show command
    show_parser = subparsers.add_parser('show', help='Print a saved report')
    show_parser.add_argument('input_file', help='Report JSON file')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging()

    try:
        if args.command == 'analyze':
            cmd_analyze(args)
        elif args.command == 'show':
            cmd_show(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
