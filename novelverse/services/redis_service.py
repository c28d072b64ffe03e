"""
Redis cache service (sync client - 핸들러가 스레드풀에서 실행됨).
- Redis 장애 시 예외 대신 None/False 반환 (캐시 미스로 처리)
- Lazy connection with health check
- JSON 직렬화/역직렬화
"""

import json
import logging
from typing import Any, Optional

import redis

from novelverse.config import Settings

logger = logging.getLogger(__name__)


class RedisService:
    def __init__(self, settings: Settings, client: Optional[redis.Redis] = None):
        self._settings = settings
        self._client = client

    def _get_client(self) -> Optional[redis.Redis]:
        """Lazy connection with health check"""
        if self._client is None:
            redis_kwargs = {
                "host": self._settings.REDIS_HOST,
                "port": self._settings.REDIS_PORT,
                "db": self._settings.REDIS_DB,
                "decode_responses": True,
                "socket_connect_timeout": 2,
                "socket_timeout": 2,
                "health_check_interval": 30,
            }
            if self._settings.REDIS_PASSWORD:
                redis_kwargs["password"] = self._settings.REDIS_PASSWORD

            client = redis.Redis(**redis_kwargs)
            try:
                client.ping()
            except redis.RedisError as e:
                logger.warning(f"Redis connection failed: {e}")
                return None
            self._client = client
        return self._client

    def get(self, key: str) -> Optional[Any]:
        """캐시 조회 - 없거나 실패하면 None"""
        client = self._get_client()
        if client is None:
            return None
        try:
            value = client.get(key)
        except redis.RedisError as e:
            logger.warning(f"Redis GET failed for {key}: {e}")
            return None
        return json.loads(value) if value else None

    def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """TTL과 함께 저장 - 성공 여부 반환"""
        client = self._get_client()
        if client is None:
            return False
        try:
            client.setex(key, ttl_seconds, json.dumps(value))
        except redis.RedisError as e:
            logger.warning(f"Redis SET failed for {key}: {e}")
            return False
        return True

    def delete(self, key: str) -> bool:
        client = self._get_client()
        if client is None:
            return False
        try:
            client.delete(key)
        except redis.RedisError as e:
            logger.warning(f"Redis DELETE failed for {key}: {e}")
            return False
        return True

    def close(self) -> None:
        """Close connection pool on app shutdown"""
        if self._client is not None:
            self._client.close()
            self._client = None
