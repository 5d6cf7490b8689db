# barbershop/db.py

from sqlmodel import SQLModel, create_engine, Session

from .config import DATABASE_URL

# SQLite needs this to be shared across FastAPI's threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Engine = connection to the database
engine = create_engine(
    DATABASE_URL,
    echo=False,          # set to True to see SQL
    connect_args=connect_args,
)


def create_db_and_tables():
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


# Dependency: one session per request
# (records stay readable after commit; the store refreshes what it writes)
def get_session():
    with Session(engine, expire_on_commit=False) as session:
        yield session
