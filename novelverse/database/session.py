from typing import Iterator

from sqlalchemy.orm import Session

from novelverse.database.connection import SessionLocal


def get_db() -> Iterator[Session]:
    """요청 단위 세션 - 핸들러에서 예외가 나면 열린 트랜잭션을 되돌린다"""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()
