from typing import Any, Dict

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from novelverse.models.base import BaseModel


class SiteSetting(BaseModel):
    """
    사이트 전역 설정 - key='global' 단일 행

    settings 컬럼은 결제 on/off(enable_payments) 및 홈 레이아웃/테마 설정을
    JSON 문서로 저장한다. 최초 조회 시 기본값으로 생성된다.
    """

    __tablename__ = "site_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    settings: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
