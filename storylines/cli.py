"""CLI entry point for the storyline engine."""

import argparse
import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from storylines.config import load_config
from storylines.db import StorylineDB
from storylines.ingest import ingest_file
from storylines.models import Storyline
from storylines.output import query_engine as qe
from storylines.timeline import render_storylines_html


def _print_storylines(storylines: list[Storyline], debug: bool = False) -> None:
    for line in storylines:
        years = line.timeframe.years
        print(f"\n{line.title} [{line.id}, {line.style.value}] {years[0] if years else '?'}-{years[-1] if years else '?'}")
        print(f"  {line.opening_line}")
        for beat in line.beats:
            link = f" <{beat.connection.type.value}: {beat.connection.label}>" if beat.connection else ""
            print(f"  {beat.id}: {beat.anecdote.title} ({beat.anecdote.year}){link} intensity={beat.intensity}")
            if debug and beat.debug:
                d = beat.debug
                print(
                    f"      total={d.total:.2f} tags={d.shared_tag_score:.2f} teller={d.storyteller_score:.2f} "
                    f"loc={d.location_score:.2f} chrono={d.chronology_score:.2f} recency={d.recency_score:.2f} "
                    f"theme={d.theme_score:.2f} usage=-{d.usage_penalty:.2f} mode=-{d.mode_penalty:.2f}"
                )
        print(f"  {line.closing_line}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Storyline engine")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # ingest command
    ingest_parser = sub.add_parser("ingest", help="Load anecdotes from a JSON or YAML file")
    ingest_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ingest_parser.add_argument("path", help="Anecdote file (.json, .yaml, .yml)")

    # generate command
    generate_parser = sub.add_parser("generate", help="Generate storylines from stored anecdotes")
    generate_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    generate_parser.add_argument("--json", action="store_true", help="Print storylines as JSON")
    generate_parser.add_argument("--no-save", action="store_true", help="Don't update the storyline cache")
    generate_parser.add_argument("--debug", action="store_true", help="Show per-beat score breakdowns")

    # show command
    show_parser = sub.add_parser("show", help="Show cached storylines")
    show_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    show_parser.add_argument("--debug", action="store_true", help="Show per-beat score breakdowns")

    # explain command
    explain_parser = sub.add_parser("explain", help="Explain why a beat was chosen")
    explain_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    explain_parser.add_argument("storyline_id", help="Storyline id, e.g. nightlife")
    explain_parser.add_argument("beat_id", help="Beat id, e.g. nightlife-2")

    # html command
    html_parser = sub.add_parser("html", help="Write storylines to a static HTML page")
    html_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    html_parser.add_argument("--output", type=str, default=None, help="Output path (default from config)")
    html_parser.add_argument("--debug", action="store_true", help="Include score breakdowns")

    # stats command
    stats_parser = sub.add_parser("stats", help="Show anecdote and cache stats")
    stats_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    db = StorylineDB(config)
    db.init_db()

    try:
        if args.command == "ingest":
            result = ingest_file(Path(args.path).expanduser().resolve(), db)
            print(result)

        elif args.command == "generate":
            storylines = qe.refresh_storylines(db, config, save=not args.no_save)
            if not storylines:
                print("No anecdotes stored. Run 'ingest' first.")
                return
            if args.json:
                print(TypeAdapter(list[Storyline]).dump_json(storylines, indent=2).decode())
            else:
                _print_storylines(storylines, debug=args.debug)

        elif args.command == "show":
            storylines = db.load_storylines()
            if not storylines:
                print("Storyline cache is empty. Run 'generate' first.")
                return
            _print_storylines(storylines, debug=args.debug)

        elif args.command == "explain":
            try:
                result = qe.explain_beat(args.storyline_id, args.beat_id, db, config)
            except ValueError as e:
                print(e)
                return
            print(json.dumps(result, indent=2))

        elif args.command == "html":
            storylines = qe.get_storylines(db, config)
            output = args.output or str(config.resolved_html_path)
            path = render_storylines_html(storylines, output, show_debug=args.debug)
            print(f"Output: {path}")

        elif args.command == "stats":
            total = db.count_anecdotes()
            if not total:
                print("No anecdotes ingested yet.")
                return
            anecdotes = db.get_all_anecdotes()
            years = sorted({a.year for a in anecdotes})
            tellers = {a.storyteller for a in anecdotes if a.storyteller}
            cached = db.load_storylines()
            print(
                f"  {total} anecdotes, {len(tellers)} storytellers, "
                f"years {years[0]}-{years[-1]}, {len(cached)} cached storylines"
            )

        else:
            parser.print_help()
    finally:
        db.close()


if __name__ == "__main__":
    main()
