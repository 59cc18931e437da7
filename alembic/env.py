# alembic/env.py
"""Migrations run against the Flask app's database.

The URL comes from DATABASE_URL or the app config; the schema comes from
the Flask-SQLAlchemy metadata once every model module is imported.
"""
from logging.config import fileConfig
import os, sys, pathlib

from alembic import context
from sqlalchemy import engine_from_config, pool

BASE_DIR = pathlib.Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)


def _resolve_url(app):
    url = os.getenv("DATABASE_URL") or app.config.get("SQLALCHEMY_DATABASE_URI")
    # Flask-SQLAlchemy keeps relative sqlite files under instance/
    if url and url.startswith("sqlite:///") and not url.startswith("sqlite:////"):
        instance_dir = pathlib.Path(app.instance_path)
        instance_dir.mkdir(parents=True, exist_ok=True)
        url = f"sqlite:///{(instance_dir / url[len('sqlite:///'):]).as_posix()}"
    return url


def _load_target():
    from wsgi import app as flask_app
    from app.extensions import db
    import app.models  # noqa: F401
    with flask_app.app_context():
        return _resolve_url(flask_app), db.metadata


url, target_metadata = _load_target()
# batch mode lets ALTER-style migrations work on sqlite
options = dict(target_metadata=target_metadata, compare_type=True,
               render_as_batch=url.startswith("sqlite"))


def run_migrations_offline():
    context.configure(url=url, literal_binds=True, **options)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config({"sqlalchemy.url": url},
                                     prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, **options)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
