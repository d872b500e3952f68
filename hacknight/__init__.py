"""
Hack Night — Community Check-ins, Streaks & Milestone Badges
============================================================
Records member check-ins at weekly hack nights, derives each member's
consecutive-attendance streak, and grants milestone badges for check-in
counts and streak lengths.

Package layout::

    hacknight/
    ├── config.py          # YAML → typed Python config
    ├── errors.py          # Exception taxonomy
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + session + async helper
    │   ├── models.py      # ORM models (members, events, attendance, badges)
    │   ├── seed.py        # Default badge definitions
    │   └── stores.py      # Narrow store interfaces + SQL implementations
    ├── engine/
    │   ├── streaks.py     # Pure streak calculation
    │   └── badges.py      # Milestone table + eligibility check
    ├── services/
    │   ├── streak_service.py      # Compute / persist / batch recompute
    │   ├── badge_service.py       # Idempotent badge grants
    │   ├── attendance_service.py  # Registration, check-in flow, history
    │   └── luma_client.py         # Guest check-in status on Luma
    ├── api/
    │   ├── main.py        # FastAPI app
    │   ├── deps.py        # Dependency injection + JWT
    │   └── routes/        # Member + admin REST endpoints
    └── __main__.py        # Maintenance CLI
"""

__version__ = "0.1.0"
