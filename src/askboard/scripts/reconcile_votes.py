"""Rewrite question vote counters from the upvote ledger.

Usage:
    python -m askboard.scripts.reconcile_votes            # every question
    python -m askboard.scripts.reconcile_votes 12 40      # selected questions
"""

from __future__ import annotations

import argparse
import logging

from sqlalchemy import select

from askboard.db.session import SessionLocal
from askboard.models import Question
from askboard.services.errors import AskboardError
from askboard.services.votes import VoteToggleService

logger = logging.getLogger(__name__)


def reconcile(question_ids: list[int] | None = None) -> dict[int, int]:
    """Recount the given questions (all when None) and return id -> count."""
    results: dict[int, int] = {}
    with SessionLocal() as db:
        ids = question_ids or list(db.execute(select(Question.id)).scalars())
        service = VoteToggleService(db)
        for question_id in ids:
            try:
                results[question_id] = service.reconcile(question_id)
            except AskboardError as exc:
                logger.warning("Skipping question %s: %s", question_id, exc)
    return results


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("question_ids", nargs="*", type=int)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    for question_id, count in reconcile(args.question_ids or None).items():
        print(f"question {question_id}: {count}")


if __name__ == "__main__":
    main()
