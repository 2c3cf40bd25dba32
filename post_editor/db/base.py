from urllib.parse import quote_plus

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def database_url(
    driver: str, username: str, password: str, host: str, port: int, database: str = ""
) -> str:
    return f"{driver}://{quote_plus(username)}:{quote_plus(password)}@{host}:{port}/{database}"


def build_engine(url: str, *, query_timeout: int = 30, pool_size: int = 5) -> Engine:
    connect_args = {}
    if url.startswith("mysql"):
        connect_args = {
            "connect_timeout": query_timeout,
            "read_timeout": query_timeout,
            "write_timeout": query_timeout,
        }
    return create_engine(
        url,
        future=True,
        echo=False,
        pool_pre_ping=True,
        pool_size=pool_size,
        connect_args=connect_args,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)
