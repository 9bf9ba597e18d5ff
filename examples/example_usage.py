"""Example: drive the attendance workflow through the service layer (no Flask).

Controllers are a thin layer; the workflow lives in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.school_admin.school_admin.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_config=settings.API_CONFIG)

    wb = container.attendance_service.open_roster("6A", "MATH", date.today())
    print(wb.session, wb.summary())
    if wb.buffer.entries:
        wb.set_status(wb.buffer.entries[0].student_id, "ABSENT")
    wb.save()
    wb.close()
    container.shutdown()


if __name__ == "__main__":
    main()
