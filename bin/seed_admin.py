# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the administrative account.

Run once after the initial migration (with the project installed, e.g.
``pip install -e .``):
    python bin/seed_admin.py

The script reads ADMIN_EMAIL (default admin@zamanix.com) and
FIRST_ADMIN_PASSWORD from etc/app.conf.  After the row is inserted the
password setting is no longer used by the application; the admin logs in
through the normal /api/users/login endpoint without a passphrase.
"""

import sys

from core.config import get_settings
from database import create_db_engine, create_session_factory
from auth.service import seed_admin


def main() -> int:
    settings = get_settings()
    if not settings.first_admin_password:
        print("[seed_admin] FIRST_ADMIN_PASSWORD not set in etc/app.conf – nothing to do.")
        return 1

    engine = create_db_engine(settings.database_url)
    db = create_session_factory(engine)()
    try:
        user, created = seed_admin(db, settings)
        if created:
            print(f"[seed_admin] Admin '{user.email}' created successfully.")
        else:
            print(f"[seed_admin] Admin '{user.email}' already exists – skipping.")
    finally:
        db.close()
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
