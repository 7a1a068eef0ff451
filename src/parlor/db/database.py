"""Generate database session"""

from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from parlor.core.config import Config
from parlor.db.schema import Base


def init_db(
    url: Optional[str] = None, echo: Optional[bool] = None
) -> sessionmaker[Session]:
    """Create the engine, make sure all tables exist and return the session factory."""
    engine: Engine = create_engine(
        url or Config.DATABASE_URL,
        echo=Config.DATABASE_ECHO if echo is None else echo,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)
