from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ThemeSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    primary_color: str = "#6366f1"
    background_color: str = "#0f172a"
    font_family: str = "Inter"


class SiteSettings(BaseModel):
    """사이트 전역 설정 문서

    결제 on/off와 홈 화면 레이아웃 플래그를 담는다.
    저장소에 없는 키는 기본값으로 채워진다.
    """

    model_config = ConfigDict(extra="allow")

    enable_payments: bool = True
    show_hero: bool = True
    show_weekly_featured: bool = True
    show_rankings: bool = True
    show_rising: bool = True
    show_tags: bool = True
    show_promo: bool = True
    show_demo_credentials: bool = False
    show_chapter_summary: bool = False
    enable_tts: bool = False
    show_book_slider: bool = True
    show_top_up: bool = True
    theme: str = "dark"
    theme_settings: ThemeSettings = Field(default_factory=ThemeSettings)


class SiteSettingsUpdate(BaseModel):
    """부분 업데이트 - 전달된 키만 병합된다"""

    model_config = ConfigDict(extra="allow")

    enable_payments: Optional[bool] = None
    show_hero: Optional[bool] = None
    show_weekly_featured: Optional[bool] = None
    show_rankings: Optional[bool] = None
    show_rising: Optional[bool] = None
    show_tags: Optional[bool] = None
    show_promo: Optional[bool] = None
    show_demo_credentials: Optional[bool] = None
    show_chapter_summary: Optional[bool] = None
    enable_tts: Optional[bool] = None
    show_book_slider: Optional[bool] = None
    show_top_up: Optional[bool] = None
    theme: Optional[str] = None
    theme_settings: Optional[Dict[str, Any]] = None
