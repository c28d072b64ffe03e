import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from novelverse.config import Settings
from novelverse.core.security import create_access_token, get_password_hash
from novelverse.database.session import get_db
from novelverse.main import app
from novelverse.models import Base, Chapter, Novel, SiteSetting, User, UserRole
from novelverse.schemas.site_settings import SiteSettings
from novelverse.services.redis_service import RedisService


@pytest.fixture
def engine(tmp_path):
    """테스트마다 새 SQLite 파일 DB (스레드 간 공유 가능)"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def test_settings():
    return Settings(SITE_SETTINGS_CACHE_TTL_SECONDS=0)


class FakeRedisClient:
    """redis.Redis 대역 - 메모리 dict에 저장하고 TTL은 기록만 한다"""

    def __init__(self):
        self.store = {}
        self.ttls = {}

    def ping(self):
        return True

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += self.store.pop(key, None) is not None
            self.ttls.pop(key, None)
        return removed

    def close(self):
        pass


@pytest.fixture
def redis_client():
    return FakeRedisClient()


@pytest.fixture
def client(session_factory, redis_client):
    """get_db와 Redis를 테스트용으로 교체한 클라이언트"""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    redis_provider = app.container.infra.redis_service
    redis_provider.override(
        providers.Object(RedisService(app.container.config.config(), client=redis_client))
    )
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    redis_provider.reset_override()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(coins: int = 0, role: UserRole = UserRole.USER, is_active: bool = True):
        counter["n"] += 1
        user = User(
            username=f"reader{counter['n']}",
            email=f"reader{counter['n']}@example.com",
            password_hash=get_password_hash("password123"),
            role=role.value,
            coins=coins,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_novel(db):
    counter = {"n": 0}

    def _make_novel(is_free: bool = False, offer_price=None, **kwargs):
        counter["n"] += 1
        novel = Novel(
            title=kwargs.pop("title", f"Novel {counter['n']}"),
            slug=kwargs.pop("slug", f"novel-{counter['n']}"),
            author=kwargs.pop("author", "Author"),
            tags=kwargs.pop("tags", []),
            is_free=is_free,
            offer_price=offer_price,
            **kwargs,
        )
        db.add(novel)
        db.commit()
        return novel

    return _make_novel


@pytest.fixture
def make_chapter(db):
    counter = {"n": 0}

    def _make_chapter(novel, is_paid: bool = True, price: int = 10, order=None):
        counter["n"] += 1
        chapter = Chapter(
            novel_id=novel.id,
            title=f"Chapter {counter['n']}",
            content=f"Secret content {counter['n']}",
            order=order if order is not None else counter["n"],
            is_paid=is_paid,
            price=price,
        )
        db.add(chapter)
        db.commit()
        return chapter

    return _make_chapter


@pytest.fixture
def set_payments(db):
    """사이트 설정 행을 직접 기록"""

    def _set_payments(enabled: bool):
        document = SiteSettings(enable_payments=enabled).model_dump(mode="json")
        row = db.query(SiteSetting).filter(SiteSetting.key == "global").first()
        if row is None:
            db.add(SiteSetting(key="global", settings=document))
        else:
            row.settings = document
        db.commit()

    return _set_payments


@pytest.fixture
def auth_headers():
    """실제 JWT로 Authorization 헤더 생성"""

    def _auth_headers(user) -> dict:
        token = create_access_token({"sub": user.id})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
