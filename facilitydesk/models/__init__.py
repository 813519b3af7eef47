"""
Model package — imports all models so Alembic and SQLAlchemy can
discover them automatically when ``flask db`` commands are run.

  - asset.py        -> asset register
  - maintenance.py  -> schedules, tasks, types, automation settings
  - scheduler.py    -> jobs (work orders), complaints, contacts
  - staff.py        -> staff directory, attendance, leave
  - package.py      -> front-desk package log
  - user.py         -> API users
  - notification.py -> per-user in-app notifications
  - audit.py        -> audit trail and automation run log
"""

from facilitydesk.models.asset import Asset  # noqa: F401
from facilitydesk.models.maintenance import (  # noqa: F401
    MaintenanceSchedule,
    MaintenanceSetting,
    MaintenanceTask,
    MaintenanceType,
)
from facilitydesk.models.scheduler import Complaint, Contact, Job  # noqa: F401
from facilitydesk.models.staff import Attendance, LeaveRequest, Staff  # noqa: F401
from facilitydesk.models.package import Package  # noqa: F401
from facilitydesk.models.user import User  # noqa: F401
from facilitydesk.models.notification import Notification  # noqa: F401
from facilitydesk.models.audit import AuditLog, AutomationRunLog  # noqa: F401
