from sqlalchemy import create_engine
from sqlmodel import Session, SQLModel

from weldbid.config import Config

engine = create_engine(Config.DATABASE_URL, echo=Config.DB_ECHO, pool_pre_ping=True)


def get_session():
    with Session(engine) as session:
        yield session


def init_db(bind=None) -> None:
    # 개발/테스트용. 운영 스키마는 마이그레이션으로 관리
    import weldbid.models  # noqa: F401  테이블 등록

    SQLModel.metadata.create_all(bind or engine)
