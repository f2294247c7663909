from sqlmodel import create_engine, Session
from mangashelf.core.config import DB_PATH

engine = create_engine(f"sqlite:///{DB_PATH}", echo=False)

def get_session() -> Session:
    # rows handed back by services must stay readable once the session is closed
    return Session(engine, expire_on_commit=False)
