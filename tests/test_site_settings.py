from unittest.mock import patch

import pytest
import redis

from novelverse.config import Settings
from novelverse.models import SiteSetting
from novelverse.schemas.site_settings import SiteSettingsUpdate
from novelverse.services.redis_service import RedisService
from novelverse.services.site_settings_service import SiteSettingsService
from novelverse.utils.cache_utils import cache_ttl_seconds, site_settings_cache_key


@pytest.fixture
def cached_settings():
    return Settings(SITE_SETTINGS_CACHE_TTL_SECONDS=60)


class TestSiteSettingsService:
    """전역 사이트 설정 테스트"""

    def test_lazily_created_with_defaults(self, db, test_settings):
        assert db.query(SiteSetting).count() == 0

        site_settings = SiteSettingsService(db, test_settings).get_settings()

        assert site_settings.enable_payments is True
        assert site_settings.show_hero is True
        row = db.query(SiteSetting).one()
        assert row.key == "global"
        assert row.settings["enable_payments"] is True

    def test_partial_update_merges(self, db, test_settings):
        service = SiteSettingsService(db, test_settings)
        service.get_settings()

        updated = service.update_settings(
            SiteSettingsUpdate(enable_payments=False, theme_settings={"primary_color": "#ff0000"})
        )

        assert updated.enable_payments is False
        assert updated.show_rankings is True
        assert updated.theme_settings.primary_color == "#ff0000"
        assert updated.theme_settings.font_family == "Inter"
        assert SiteSettingsService(db, test_settings).get_settings(fresh=True).enable_payments is False

    def test_cached_read_and_fresh_read(self, db, cached_settings, redis_client, set_payments):
        service = SiteSettingsService(db, cached_settings, RedisService(cached_settings, client=redis_client))
        assert service.get_settings().enable_payments is True

        # Given: 캐시를 거치지 않고 DB가 바뀜
        set_payments(False)

        # Then: 일반 조회는 캐시, fresh 조회는 DB
        assert service.get_settings().enable_payments is True
        assert service.get_settings(fresh=True).enable_payments is False

    def test_update_invalidates_cache(self, db, cached_settings, redis_client):
        service = SiteSettingsService(db, cached_settings, RedisService(cached_settings, client=redis_client))
        service.get_settings()
        assert site_settings_cache_key("global") in redis_client.store

        service.update_settings(SiteSettingsUpdate(enable_payments=False))

        assert service.get_settings().enable_payments is False

    def test_update_visible_to_other_instances(self, session_factory, cached_settings, redis_client):
        # 같은 Redis를 공유하는 서로 다른 서버 인스턴스의 요청 (요청마다 새 세션)
        def request_on_new_instance():
            return SiteSettingsService(
                session_factory(), cached_settings, RedisService(cached_settings, client=redis_client)
            )

        assert request_on_new_instance().get_settings().enable_payments is True

        request_on_new_instance().update_settings(SiteSettingsUpdate(enable_payments=False))

        assert request_on_new_instance().get_settings().enable_payments is False

    def test_cache_entry_uses_configured_ttl(self, db, cached_settings, redis_client):
        service = SiteSettingsService(db, cached_settings, RedisService(cached_settings, client=redis_client))
        service.get_settings()

        assert redis_client.ttls[site_settings_cache_key("global")] == 60

    def test_zero_ttl_skips_redis(self, db, test_settings, redis_client):
        service = SiteSettingsService(db, test_settings, RedisService(test_settings, client=redis_client))
        service.get_settings()
        assert redis_client.store == {}


class BrokenRedisClient:
    def ping(self):
        return True

    def get(self, key):
        raise redis.ConnectionError("connection reset")

    def setex(self, key, ttl, value):
        raise redis.ConnectionError("connection reset")

    def delete(self, *keys):
        raise redis.ConnectionError("connection reset")


class TestRedisService:
    """Redis 장애는 캐시 미스로 처리"""

    def test_errors_degrade_to_database(self, db, cached_settings, set_payments):
        set_payments(False)
        service = SiteSettingsService(db, cached_settings, RedisService(cached_settings, client=BrokenRedisClient()))

        assert service.get_settings().enable_payments is False
        updated = service.update_settings(SiteSettingsUpdate(enable_payments=True))
        assert updated.enable_payments is True

    def test_unreachable_server(self, cached_settings):
        with patch("novelverse.services.redis_service.redis.Redis") as redis_cls:
            redis_cls.return_value.ping.side_effect = redis.ConnectionError("refused")
            service = RedisService(cached_settings)

            assert service.get("k") is None
            assert service.set("k", {"a": 1}, 5) is False

    def test_json_round_trip(self, cached_settings, redis_client):
        service = RedisService(cached_settings, client=redis_client)
        assert service.set("k", {"enable_payments": False}, 5) is True
        assert service.get("k") == {"enable_payments": False}
        assert service.delete("k") is True
        assert service.get("k") is None


@pytest.mark.parametrize("ttl,expected", [(5.0, 5), (0.2, 1), (0, 0), (-1, 0)])
def test_cache_ttl_seconds(ttl, expected):
    assert cache_ttl_seconds(ttl) == expected
