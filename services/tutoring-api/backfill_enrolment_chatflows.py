#!/usr/bin/env python3
"""
Backfill script assigning the default chatflow to every student enrolment.

This script:
1. Reads the root ``chatflowId`` and enrolments of every student
2. Sets the root ``chatflowId`` and each enrolment's ``chatflowId`` to the
   configured chatflow (DEFAULT_CHATFLOW_ID unless overridden)
3. Reports how many students and enrolments changed

Usage:
    python backfill_enrolment_chatflows.py --dry-run  # Report without writing
    python backfill_enrolment_chatflows.py            # Execute backfill
"""

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Tuple

import structlog

from app.config import settings
from app.database import db
from app.logging_config import setup_logging
from app.repositories import StudentRepository

logger = structlog.get_logger(__name__)


class BackfillStats:
    """Track backfill statistics."""

    def __init__(self):
        self.total_students = 0
        self.updated_students = 0
        self.enrolments_touched = 0

    def print_report(self, dry_run: bool):
        print("\n" + "=" * 60)
        print("CHATFLOW BACKFILL SUMMARY" + (" (DRY RUN)" if dry_run else ""))
        print("=" * 60)
        print(f"Students scanned:          {self.total_students}")
        print(f"Students updated:          {self.updated_students}")
        print(f"Enrolments reset:          {self.enrolments_touched}")
        print("=" * 60)


def plan_student_update(
    student: Dict[str, Any], chatflow_id: str
) -> Tuple[List[Dict[str, Any]], bool]:
    """
    Compute the new enrolments of a student.

    Returns:
        Tuple of (updated enrolments, whether anything changes)
    """
    current = student.get("enrolments") or []
    updated = [{**enrolment, "chatflowId": chatflow_id} for enrolment in current]

    changed = (student.get("chatflowId") or "") != chatflow_id or any(
        (enrolment.get("chatflowId") or "") != chatflow_id for enrolment in current
    )
    return updated, changed


async def run_backfill(chatflow_id: str, dry_run: bool = False) -> BackfillStats:
    """
    Apply the default chatflow to every student.

    Raises:
        ValueError: If the chatflow id is empty
    """
    chatflow_id = (chatflow_id or "").strip()
    if not chatflow_id:
        raise ValueError(
            "A chatflow id is required; set DEFAULT_CHATFLOW_ID or pass --chatflow-id"
        )

    stats = BackfillStats()

    await db.connect()
    try:
        repository = StudentRepository(db.get_database())
        students = await repository.list_chatflow_fields()
        stats.total_students = len(students)

        for student in students:
            enrolments, changed = plan_student_update(student, chatflow_id)
            if not changed:
                continue

            stats.updated_students += 1
            stats.enrolments_touched += len(enrolments)

            if dry_run:
                logger.info("Would update student", student_id=str(student["_id"]))
                continue

            await repository.set_chatflow(student["_id"], chatflow_id, enrolments)
            logger.info("Student updated", student_id=str(student["_id"]))
    finally:
        await db.disconnect()

    return stats


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Assign the default chatflow to every student enrolment"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the changes without writing them",
    )
    parser.add_argument(
        "--chatflow-id",
        default=settings.DEFAULT_CHATFLOW_ID,
        help="Chatflow id to assign (defaults to DEFAULT_CHATFLOW_ID)",
    )
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL, "chatflow-backfill")

    try:
        stats = asyncio.run(run_backfill(args.chatflow_id, dry_run=args.dry_run))
    except Exception as e:
        logger.error("Backfill failed", error=str(e), exc_info=True)
        sys.exit(1)

    stats.print_report(args.dry_run)


if __name__ == "__main__":
    main()
