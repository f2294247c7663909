from pathlib import Path
from sqlmodel import SQLModel
from mangashelf.db import session
from mangashelf.models import LibraryEntry  # noqa: F401 registers the table

def init_db():
    database = session.engine.url.database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(session.engine)
