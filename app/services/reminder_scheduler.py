import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from pymongo.errors import PyMongoError

from app.core.recurrence import ReminderState, is_due, resolve
from app.core.time_utils import utc_now
from app.db.repository import find_due_reminders, update_reminder

load_dotenv()

logger = logging.getLogger(__name__)

CHECK_INTERVAL_SECONDS = 60
JOB_ID = "check_reminders"

scheduler: Optional[BackgroundScheduler] = None


@dataclass
class ScanSummary:
    due: int = 0
    advanced: int = 0
    deactivated: int = 0
    skipped: int = 0


def scheduler_enabled() -> bool:
    return os.getenv("REMINDER_SCHEDULER_ENABLED", "true").lower() in ("1", "true", "yes")


def check_reminders(now: Optional[datetime] = None) -> ScanSummary:
    now = now or utc_now()
    summary = ScanSummary()

    try:
        due_reminders = find_due_reminders(now)
    except PyMongoError as e:
        logger.error("Error checking reminders: %s", e)
        return summary

    summary.due = len(due_reminders)
    for doc in due_reminders:
        reminder = ReminderState.from_document(doc)
        if not is_due(reminder, now):
            logger.info("Reminder %s is no longer due, skipping", doc["_id"])
            summary.skipped += 1
            continue

        # Delivery is not implemented, a due reminder is only logged
        logger.info("Reminder due: %s for user %s", doc.get("title"), doc.get("user_id"))

        update = resolve(reminder)
        if update is None:
            logger.warning(
                "Reminder %s has invalid recurring pattern %r, leaving it unchanged",
                doc["_id"], reminder.recurring_pattern,
            )
            summary.skipped += 1
            continue

        try:
            applied = update_reminder(doc["_id"], update, expected_date=reminder.reminder_date)
        except PyMongoError as e:
            logger.error("Error updating reminder %s: %s", doc["_id"], e)
            summary.skipped += 1
            continue

        if not applied:
            logger.info("Reminder %s changed since it was read, skipping", doc["_id"])
            summary.skipped += 1
        elif update.is_active is False:
            summary.deactivated += 1
        else:
            summary.advanced += 1

    return summary


def start_scheduler() -> BackgroundScheduler:
    global scheduler
    if scheduler is not None and scheduler.running:
        return scheduler

    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        check_reminders,
        "interval",
        seconds=CHECK_INTERVAL_SECONDS,
        id=JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Reminder scheduler started")
    return scheduler


def shutdown_scheduler() -> None:
    global scheduler
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Reminder scheduler stopped")
    scheduler = None
