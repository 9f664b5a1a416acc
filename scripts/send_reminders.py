#!/usr/bin/env python3
"""
Send every due reminder once and exit.
Meant for a system cron job when the HTTP cron endpoint is not used.
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("send_reminders")


def main() -> int:
    from domain.models import SessionLocal
    from services.reminder_service import ReminderService

    db = SessionLocal()
    try:
        result = ReminderService.send_due_reminders(db)
    finally:
        db.close()

    logger.info(f"Sent {result.sent} reminders")
    for error in result.errors:
        logger.error(f"✗ {error}")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
