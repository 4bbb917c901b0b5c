from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from clinicdesk.config import settings
from clinicdesk.database import Base
# Import all models so their tables are registered on Base.metadata
from clinicdesk.core import audit_models  # noqa: F401
from clinicdesk.staff import models as staff_models  # noqa: F401
from clinicdesk.patients import models as patient_models  # noqa: F401
from clinicdesk.prescriptions import models as prescription_models  # noqa: F401
from clinicdesk.operations import models as operation_models  # noqa: F401
from clinicdesk.medicines import models as medicine_models  # noqa: F401
from clinicdesk.opticals import models as optical_models  # noqa: F401
from clinicdesk.labs import models as lab_models  # noqa: F401
from clinicdesk.dropdowns import models as dropdown_models  # noqa: F401
from clinicdesk.expenses import models as expense_models  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
