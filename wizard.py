#!/usr/bin/env python3
"""
SEO Wizard - bulk keyword article generator with WordPress export

This is the main entry point. It drives the keyword pipeline
(research -> ideation -> outline -> article -> images) over a batch of
keywords, and exports stored articles for WordPress.

Usage:
  Run a batch:       python wizard.py run --keywords-file keywords.txt --language vi
  Browse history:    python wizard.py history list
  Export an article: python wizard.py export <id> --format xml
  New image:         python wizard.py regenerate <id> --image 2
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from seowizard.config import get_export_config, get_history_config, validate_api_key
from seowizard.export import export_clean_html, extract_embedded_images, write_package, write_wxr
from seowizard.history_store import HistoryStore
from seowizard.llm_client import create_llm_client
from seowizard.models import OutputLanguage, RunState
from seowizard.pipeline import BulkPipeline, ContentGenerator, ImageGenerator
from seowizard.utils import parse_keywords, setup_logging


def setup_argparse() -> argparse.ArgumentParser:
    """
    Set up command line argument parsing.

    Returns:
        ArgumentParser object with configured arguments
    """
    parser = argparse.ArgumentParser(
        description="Generate SEO articles in bulk and export them for WordPress"
    )
    parser.add_argument("--history-dir", type=str, help="Directory of the article history store")

    subparsers = parser.add_subparsers(dest="command", help="Command")

    run_parser = subparsers.add_parser("run", help="Process a batch of keywords")
    run_parser.add_argument("--keyword", action="append", default=[],
                            help="Keyword to process (repeatable)")
    run_parser.add_argument("--keywords-file", type=str,
                            help="File with one keyword per line")
    run_parser.add_argument("--language", type=str, default="vi", choices=[lang.value for lang in OutputLanguage],
                            help="Output language")
    run_parser.add_argument("--provider", type=str, choices=["gemini", "openai"],
                            help="LLM provider (default from LLM_PROVIDER)")

    history_parser = subparsers.add_parser("history", help="Browse the article history")
    history_parser.add_argument("action", choices=["list", "show", "delete", "clear"])
    history_parser.add_argument("record_id", nargs="?", help="Record id for show/delete")

    export_parser = subparsers.add_parser("export", help="Export a stored article")
    export_parser.add_argument("record_id", help="Record id")
    export_parser.add_argument("--format", type=str, default="xml", choices=["html", "zip", "xml"],
                               help="Export format")
    export_parser.add_argument("--output-dir", type=str, help="Directory for zip/xml files")
    export_parser.add_argument("--category", type=str, help="WordPress category for xml export")

    regen_parser = subparsers.add_parser("regenerate", help="Regenerate one image of a stored article")
    regen_parser.add_argument("record_id", help="Record id")
    regen_parser.add_argument("--image", type=int, required=True, help="1-based index of the embedded image")
    regen_parser.add_argument("--provider", type=str, choices=["gemini", "openai"],
                              help="LLM provider (default from LLM_PROVIDER)")

    return parser


def build_pipeline(history_store: HistoryStore, provider: Optional[str] = None) -> BulkPipeline:
    llm_client = create_llm_client(provider)
    return BulkPipeline(
        content_generator=ContentGenerator(llm_client),
        image_generator=ImageGenerator(llm_client),
        history_store=history_store,
        on_progress=print_progress
    )


def print_progress(state: RunState):
    print(f"[{state.completed}/{state.total}] {state.status_message}")


def collect_keywords(args) -> List[str]:
    lines = list(args.keyword)
    if args.keywords_file:
        lines.extend(Path(args.keywords_file).read_text(encoding="utf-8").splitlines())
    return parse_keywords(lines)


def run_batch(args, history_store: HistoryStore) -> int:
    """Run the bulk pipeline over the requested keywords."""
    keywords = collect_keywords(args)
    if not keywords:
        print("No keywords given. Use --keyword or --keywords-file.")
        return 1

    if not validate_api_key(args.provider):
        return 1

    pipeline = build_pipeline(history_store, args.provider)
    state = pipeline.run(keywords, OutputLanguage(args.language))
    print(f"\nProcessed {state.completed} of {state.total} keywords")
    return 0


def run_history(args, history_store: HistoryStore) -> int:
    if args.action == "list":
        for record in history_store.list_records():
            print(f"{record.id}\t[{record.language.label}]\t{record.keyword}")
        return 0

    if args.action == "clear":
        history_store.clear()
        print("History cleared.")
        return 0

    if not args.record_id:
        print(f"Error: a record id is required for '{args.action}'.")
        return 1

    if args.action == "show":
        record = history_store.get(args.record_id)
        if not record:
            print(f"Record not found: {args.record_id}")
            return 1
        print(f"\n{'=' * 80}\n{record.keyword}\n{'=' * 80}\n")
        print(record.content)
        return 0

    history_store.delete(args.record_id)
    print(f"Deleted {args.record_id}")
    return 0


def run_export(args, history_store: HistoryStore) -> int:
    record = history_store.get(args.record_id)
    if not record:
        print(f"Record not found: {args.record_id}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else get_export_config()["output_dir"]

    if args.format == "html":
        print(export_clean_html(record.content, record.keyword, record.language))
    elif args.format == "zip":
        path = write_package(record.content, record.keyword, output_dir)
        print(f"Package saved to: {path}")
    else:
        path = write_wxr(record.content, record.keyword, output_dir,
                         category=args.category, language=record.language)
        print(f"WordPress import file saved to: {path}")
    return 0


def run_regenerate(args, history_store: HistoryStore) -> int:
    record = history_store.get(args.record_id)
    if not record:
        print(f"Record not found: {args.record_id}")
        return 1

    images = extract_embedded_images(record.content)
    if not 1 <= args.image <= len(images):
        print(f"Image index out of range: the article has {len(images)} image(s).")
        return 1

    if not validate_api_key(args.provider):
        return 1

    image = images[args.image - 1]
    pipeline = build_pipeline(history_store, args.provider)
    updated = pipeline.regenerate_image(record, image.data_uri, image.alt)
    if not updated:
        print("Could not regenerate image. Please try again.")
        return 1
    print(f"Image {args.image} regenerated for '{updated.keyword}'.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the SEO Wizard command line.
    """
    setup_logging()

    parser = setup_argparse()
    args = parser.parse_args(argv)

    history_dir = Path(args.history_dir) if args.history_dir else get_history_config()["history_dir"]
    history_store = HistoryStore(history_dir)

    commands = {
        "run": run_batch,
        "history": run_history,
        "export": run_export,
        "regenerate": run_regenerate,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args, history_store)
    except ValueError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
