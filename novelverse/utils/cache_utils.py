"""
Cache key generation and TTL calculation utilities.
Key Format: novelverse:site_settings:{key}
"""

import math


def site_settings_cache_key(settings_key: str) -> str:
    """사이트 설정 문서의 Redis 키"""
    return f"novelverse:site_settings:{settings_key}"


def cache_ttl_seconds(ttl: float) -> int:
    """
    설정값(초, 소수 허용)을 Redis SETEX용 정수 TTL로 변환.

    Examples:
        5.0 → 5
        0.2 → 1 (양수는 최소 1초)
        0 / 음수 → 0 (캐시 사용 안 함)
    """
    if ttl <= 0:
        return 0
    return max(1, math.ceil(ttl))
