"""
Scheduler Service
Materialises due recurring transactions once a day using APScheduler
"""
import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.config import settings
from app.db import dynamo
from app.models.recurring import RecurringStatus
from app.models.transaction import TransactionInDB
from app.services.recurring import due_occurrences
from app.utils.dates import parse_datetime

logger = logging.getLogger(__name__)

JOB_ID = "recurring_transactions"

# Scheduler instance (exported for the health router)
scheduler: Optional[BackgroundScheduler] = None


def process_user_recurring_transactions(user_id: str, now: Optional[datetime] = None) -> int:
    """Create the transactions due for one user's series. Returns how many were created."""
    now = now or datetime.utcnow()
    created = 0

    for recurring in dynamo.get_user_recurring_transactions(user_id):
        if recurring.get("status", RecurringStatus.ACTIVE.value) != RecurringStatus.ACTIVE.value:
            continue
        due = due_occurrences(recurring, now)
        if not due.dates and not due.completed:
            continue

        next_date = due.next_occurrence_date
        completed = due.completed
        for when in due.dates:
            transaction = TransactionInDB(
                user_id=user_id,
                account_id=recurring["account_id"],
                amount=recurring["amount"],
                type=recurring["type"],
                category=recurring["category"],
                description=recurring.get("description"),
                transaction_date=when,
                is_recurring=True,
                recurring_id=recurring["recurring_id"],
                categorized_automatically=False,
            )
            if not dynamo.put_transaction(transaction.model_dump(mode="json")):
                # Resume from the failed occurrence on the next run.
                logger.error(f"Failed to create occurrence {when.isoformat()} of {recurring['recurring_id']}")
                next_date = when
                completed = False
                break
            created += 1

        if next_date == parse_datetime(recurring["next_occurrence_date"]) and not completed:
            continue

        updates = {"next_occurrence_date": next_date.isoformat()}
        if completed:
            updates["status"] = RecurringStatus.COMPLETED.value
        if dynamo.update_recurring_transaction(user_id, recurring["recurring_id"], updates) is None:
            logger.error(
                f"Failed to advance recurring transaction {recurring['recurring_id']} "
                f"to {next_date.isoformat()}; created occurrences may be repeated"
            )

    return created


def recurring_transactions_job():
    """Job function run by the scheduler for every user"""
    logger.info("Executing recurring transactions job...")
    total = 0
    for user_id in dynamo.get_all_user_ids():
        try:
            total += process_user_recurring_transactions(user_id)
        except Exception as e:
            logger.error(f"Error processing recurring transactions for user {user_id}: {str(e)}", exc_info=True)
    logger.info(f"Recurring transactions job created {total} transaction(s)")
    return total


def start_scheduler():
    """Start the background scheduler with the daily recurring job"""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler is already running")
        return

    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        recurring_transactions_job,
        trigger=CronTrigger(
            hour=settings.RECURRING_SCHEDULER_HOUR,
            minute=settings.RECURRING_SCHEDULER_MINUTE,
        ),
        id=JOB_ID,
        name="Recurring Transactions",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started: recurring job daily at "
        f"{settings.RECURRING_SCHEDULER_HOUR:02d}:{settings.RECURRING_SCHEDULER_MINUTE:02d} UTC"
    )


def stop_scheduler():
    """Stop the background scheduler"""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")


def get_scheduler_status():
    """Get current scheduler status"""
    if scheduler is None:
        return {"running": False}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": str(job.next_run_time) if job.next_run_time else None
        })

    return {
        "running": scheduler.running,
        "jobs": jobs
    }
