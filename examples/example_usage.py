"""Example: drive the service layer directly (no Flask).

Goal: controllers stay a thin layer; the accounting rules live in services.
"""

import importlib

from config import get_settings_module

from lesson_ledger.common.datetime_utils import current_week_id, today_iso
from lesson_ledger.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, unmark_policy=settings.UNMARK_POLICY)
    container.ledger_service.load()

    active, inactive = container.report_service.partition_by_active()
    print(f"{len(active)} active / {len(inactive)} inactive students")
    print(container.report_service.day_attendance(today_iso()))
    print(container.report_service.weekly_counts(current_week_id()))


if __name__ == "__main__":
    main()
