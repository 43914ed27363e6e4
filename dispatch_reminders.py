# -*- coding: utf-8 -*-
"""
Reminder dispatcher, meant to run from cron.

Reads the pending reminders, posts each one to the notification webhook and
acknowledges it as sent. A reminder whose delivery fails stays pending and is
retried on the next run.
"""

import argparse
import logging
import sys

import requests
from dotenv import load_dotenv

load_dotenv()

from troop_events.config import Config
from troop_events.database import SessionLocal
from troop_events import models  # registers every table on Base.metadata
from troop_events.services.reminders import ReminderScheduler

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def reminder_payload(reminder):
    return {
        "reminder_id": reminder.id,
        "event_id": reminder.event_id,
        "event_title": reminder.event_title,
        "event_date": reminder.event_date.isoformat(),
        "event_time": reminder.event_time.isoformat() if reminder.event_time else None,
        "reminder_type": reminder.reminder_type,
        "reminder_time": reminder.reminder_time.isoformat(),
    }


def dispatch(db, webhook_url, limit=None, dry_run=False, timeout=10):
    """Returns (sent, failed) counts."""
    scheduler = ReminderScheduler(db)
    pending = scheduler.get_pending_reminders()
    if limit:
        pending = pending[:limit]
    payloads = [reminder_payload(reminder) for reminder in pending]
    # No transaction may stay open while the webhook is called
    db.commit()

    logging.info(f"{len(payloads)} pending reminders found.")

    sent = failed = 0
    for payload in payloads:
        reminder_id = payload["reminder_id"]

        if dry_run:
            logging.info(f"-> DRY RUN: reminder {reminder_id} ({payload['reminder_type']}) for '{payload['event_title']}'")
            continue

        try:
            response = requests.post(webhook_url, json=payload, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            failed += 1
            logging.error(f"Delivery of reminder {reminder_id} failed: {e}")
            continue

        scheduler.mark_reminder_sent(reminder_id)
        sent += 1
        logging.info(f"-> SENT: reminder {reminder_id} for '{payload['event_title']}'")

    return sent, failed


def main(argv=None):
    parser = argparse.ArgumentParser(description='Send pending event reminders')
    parser.add_argument('--limit', type=int, help='Maximum number of reminders to send')
    parser.add_argument('--dry-run', action='store_true', help='Only list what would be sent')
    args = parser.parse_args(argv)

    webhook_url = Config.REMINDER_WEBHOOK_URL
    if not webhook_url and not args.dry_run:
        logging.error("REMINDER_WEBHOOK_URL not found in the environment.")
        return 1

    db = SessionLocal()
    try:
        sent, failed = dispatch(db, webhook_url, limit=args.limit, dry_run=args.dry_run)
    finally:
        db.close()

    logging.info(f"Done: {sent} sent, {failed} failed.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
