"""
Command-line front end for the vocabulary store.

Storage is chosen by STORAGE_BACKEND (see core.config).

Usage:
    python -m scripts.vocab_cli add 가다 --notes "to go"
    python -m scripts.vocab_cli import words.csv [--dry-run]
    python -m scripts.vocab_cli due [--limit N]
    python -m scripts.vocab_cli recent [--limit N]
    python -m scripts.vocab_cli preview 가다
    python -m scripts.vocab_cli review 가다 good
    python -m scripts.vocab_cli show 가다
    python -m scripts.vocab_cli stats
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from core import config
from core.analytics import build_vocabulary_summary, load_card_snapshots_df
from core.errors import VocabularyError
from core.fsrs import Rating, as_utc
from core.storage import KeyValueStorage, get_storage
from core.vocab import VocabularyItem, VocabularyStore

logger = logging.getLogger(__name__)

RATING_CHOICES = {rating.name.lower(): rating for rating in Rating}


def _format_item(item: VocabularyItem) -> str:
    notes = item.notes or "(no notes)"
    return f"{item.text}: {notes}  [due {item.card.due:%Y-%m-%d %H:%M}]"


def _format_interval(scheduled_days: int, due: datetime, now: datetime) -> str:
    if scheduled_days > 0:
        return f"{scheduled_days}d"
    minutes = max(0, round((due - now).total_seconds() / 60))
    return f"{minutes}m"


# ---- Commands ----

def cmd_add(store: VocabularyStore, args: argparse.Namespace, now: datetime) -> int:
    store.add_item(args.text, args.notes, now=now)
    store.save()
    print(f"✓ Added {args.text}")
    return 0


def cmd_import(store: VocabularyStore, args: argparse.Namespace, now: datetime) -> int:
    """Add every row of a CSV with `text` and optional `notes` columns."""
    csv_path = Path(args.csv)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype=str).fillna("")
    if "text" not in df.columns:
        raise ValueError(f"{csv_path} has no 'text' column")
    if "notes" not in df.columns:
        df["notes"] = ""

    added = 0
    skipped = 0
    seen: set[str] = set()
    for row in df.itertuples(index=False):
        text = row.text.strip()
        if not text or text in store or text in seen:
            skipped += 1
            continue
        seen.add(text)
        if not args.dry_run:
            store.add_item(text, row.notes.strip(), now=now)
        added += 1

    if not args.dry_run:
        store.save()
    print(f"{'Would add' if args.dry_run else 'Added'} {added} words, skipped {skipped}")
    return 0


def cmd_due(store: VocabularyStore, args: argparse.Namespace, now: datetime) -> int:
    items = store.due_items(args.limit)
    if not items:
        print("No words yet")
    for item in items:
        marker = "*" if item.card.due <= now else " "
        print(f"{marker} {_format_item(item)}")
    return 0


def cmd_recent(store: VocabularyStore, args: argparse.Namespace, now: datetime) -> int:
    items = store.recent_items(args.limit)
    if not items:
        print("No words yet")
    for item in items:
        print(_format_item(item))
    return 0


def cmd_preview(store: VocabularyStore, args: argparse.Namespace, now: datetime) -> int:
    outcomes = store.preview_item(args.text, now)
    for rating, card in outcomes.items():
        interval = _format_interval(card.scheduled_days, card.due, now)
        print(f"{rating.name.lower():>5}: {interval}")
    return 0


def cmd_review(store: VocabularyStore, args: argparse.Namespace, now: datetime) -> int:
    item = store.review_item(args.text, RATING_CHOICES[args.rating], now)
    interval = _format_interval(item.card.scheduled_days, item.card.due, now)
    print(f"✓ {item.text} next due in {interval}")
    return 0


def cmd_show(store: VocabularyStore, args: argparse.Namespace, now: datetime) -> int:
    item = store.lookup(args.text)
    if item is None:
        print(f"{args.text} is not in the vocabulary", file=sys.stderr)
        return 1
    card = item.card
    print(f"Text:        {item.text}")
    print(f"Notes:       {item.notes or '(no notes)'}")
    print(f"State:       {card.state.name.title()}")
    print(f"Due:         {card.due.isoformat()}")
    print(f"Stability:   {card.stability:.2f} days")
    print(f"Difficulty:  {card.difficulty:.2f}")
    print(f"Reviews:     {card.reps} ({card.lapses} lapses)")
    print(f"Last review: {card.last_review.isoformat() if card.last_review else 'never'}")
    return 0


def cmd_stats(store: VocabularyStore, args: argparse.Namespace, now: datetime) -> int:
    summary = build_vocabulary_summary(store, now)
    print(f"Words:          {summary.total}")
    for label, count in summary.state_counts.items():
        print(f"  {label:<12}  {count}")
    print(f"Due now:        {summary.due_now}")
    print(f"Learned:        {summary.learned}")
    print(f"Lapses:         {summary.lapses}")
    print(f"Mean stability: {summary.mean_stability:.1f} days")

    if args.table:
        df = load_card_snapshots_df(store, now)
        if not df.empty:
            print()
            print(df.to_string(index=False))
    return 0


COMMANDS = {
    "add": cmd_add,
    "import": cmd_import,
    "due": cmd_due,
    "recent": cmd_recent,
    "preview": cmd_preview,
    "review": cmd_review,
    "show": cmd_show,
    "stats": cmd_stats,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vocab",
        description=f"Study {config.get_learn_language()} vocabulary with spaced repetition",
    )
    parser.add_argument(
        "--backend",
        default=None,
        help="Storage backend: sql, mongo or memory (default: STORAGE_BACKEND)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add a word")
    add.add_argument("text")
    add.add_argument("--notes", default="", help="Definition or translation")

    import_ = subparsers.add_parser("import", help="Add words from a CSV file")
    import_.add_argument("csv", help="CSV with 'text' and optional 'notes' columns")
    import_.add_argument("--dry-run", action="store_true", help="Report without saving")

    for name, help_text in (("due", "Words due soonest"), ("recent", "Most recently reviewed words")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--limit", type=int, default=20)

    preview = subparsers.add_parser("preview", help="Show the interval each rating would give")
    preview.add_argument("text")

    review = subparsers.add_parser("review", help="Record a review")
    review.add_argument("text")
    review.add_argument("rating", choices=list(RATING_CHOICES))

    show = subparsers.add_parser("show", help="Show a word's card")
    show.add_argument("text")

    stats = subparsers.add_parser("stats", help="Summarize the collection")
    stats.add_argument("--table", action="store_true", help="Also print every card")

    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    storage: Optional[KeyValueStorage] = None,
    now: Optional[datetime] = None
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=config.get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    now = as_utc(now) if now is not None else datetime.now(timezone.utc)

    try:
        store = VocabularyStore.open(storage if storage is not None else get_storage(args.backend))
        return COMMANDS[args.command](store, args, now)
    except (VocabularyError, ValueError, FileNotFoundError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
