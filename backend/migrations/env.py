# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Alembic environment – wires the migration engine to the application's
metadata and connection string.

The database URL comes from the application's Settings (etc/app.conf), so
there is a single source of truth for the connection string.
"""

from alembic import context

from core.config import get_settings
from database import Base, create_db_engine

# Import every ORM model so that Base.metadata knows about all tables.
# Without this, ``alembic revision --autogenerate`` cannot detect them.
import models.user       # noqa: F401, E402
import models.blog_post  # noqa: F401, E402

settings = get_settings()


def run_migrations_online():
    connectable = create_db_engine(settings.database_url)
    with connectable.connect() as conn:
        context.configure(
            connection=conn,
            target_metadata=Base.metadata,
        )
        with context.begin_transaction():
            context.run_migrations()


def run_migrations_offline():
    """Generate SQL without a live connection (``alembic upgrade --sql``)."""
    context.configure(
        url=settings.database_url,
        target_metadata=Base.metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
