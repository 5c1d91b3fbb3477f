"""
Seed the ``models`` table with the default model catalog.

Usage (from the backend directory):
    python -m src.scripts.seed_models [--dry-run]

Models are inserted in catalog order, so their creation timestamps give the
display order. Tags that already exist are skipped.
"""
import argparse
import logging
from typing import Dict, List

from src.services.storage import ChatStore

logger = logging.getLogger(__name__)

DEFAULT_MODEL_CATALOG: List[Dict[str, str]] = [
    {
        "tag": "gemini-1.5-flash-latest",
        "name": "Gemini Flash",
        "description": "Fast responses for everyday questions",
    },
    {
        "tag": "gemini-1.5-pro-latest",
        "name": "Gemini Pro",
        "description": "Stronger reasoning for longer answers",
    },
    {
        "tag": "gemini-pro-latest",
        "name": "Gemini Pro (latest)",
        "description": "Tracks the newest Pro release",
    },
    {
        "tag": "gpt-4o-mini",
        "name": "GPT-4o mini",
        "description": "OpenAI's small general-purpose model",
    },
]


def seed_models(store: ChatStore, catalog: List[Dict[str, str]], dry_run: bool = False) -> List[str]:
    """
    Insert catalog entries whose tag is not stored yet.

    Returns:
        Tags that were inserted (or would be, with ``dry_run``)
    """
    existing = {model.tag for model in store.list_models()}
    inserted = []
    for entry in catalog:
        if entry["tag"] in existing:
            logger.info(f"Skipping existing model '{entry['tag']}'")
            continue
        if not dry_run:
            store.insert_model(entry)
        inserted.append(entry["tag"])
        existing.add(entry["tag"])
    return inserted


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Seed the models table")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the models that would be inserted without writing",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    from src.config.database import get_supabase
    from src.services.storage import SupabaseChatStore

    store = SupabaseChatStore(get_supabase())
    inserted = seed_models(store, DEFAULT_MODEL_CATALOG, dry_run=args.dry_run)

    verb = "Would insert" if args.dry_run else "Inserted"
    print(f"{verb} {len(inserted)} model(s): {', '.join(inserted) or '-'}")


if __name__ == "__main__":
    main()
