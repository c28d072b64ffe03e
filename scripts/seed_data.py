"""
데모 데이터 시드 스크립트
관리자/독자 계정, 사이트 설정, 샘플 작품과 회차(앞 2화 무료, 이후 5코인)를 생성
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from novelverse.config import settings
from novelverse.core.security import get_password_hash
from novelverse.database.connection import SessionLocal, engine
from novelverse.models import (
    Base,
    Bookmark,
    Chapter,
    CoinTransaction,
    Novel,
    PurchasedChapter,
    SiteSetting,
    User,
    UserRole,
)
from novelverse.schemas.site_settings import SiteSettings
from novelverse.services.novel_service import slugify

CHAPTERS_PER_NOVEL = 5
FREE_CHAPTERS = 2
PAID_CHAPTER_PRICE = 5

SAMPLE_NOVELS = [
    # (title, author, tags, category, status, views, rating, weekly featured)
    ("Shadow Monarch", "Sung Jin-Woo", ["Action", "Fantasy", "System"], "Original", "Ongoing", 125000, 4.8, True),
    ("Cultivation Chronicles", "Li Wei", ["Cultivation", "Xianxia", "Adventure"], "Translation", "Ongoing", 98000, 4.6, True),
    ("Regression of the Magic Swordsman", "Kim Tae-hyun", ["Regression", "Magic", "Action"], "Original", "Ongoing", 87000, 4.7, True),
    ("Omniscient Reader's Viewpoint", "Dokja Kim", ["Fantasy", "System", "Apocalypse"], "Original", "Completed", 150000, 4.9, True),
    ("Dungeon Chef", "GourmetKing", ["Fantasy", "Slice of Life", "Comedy"], "Original", "Ongoing", 89000, 4.8, False),
    ("Love in the Time of Portals", "RoseHeart", ["Romance", "Sci-Fi", "Drama"], "Fanfic", "Ongoing", 42000, 4.7, False),
]


def clear_data(db):
    """기존 데이터 삭제 (FK 순서 고려)"""
    for model in (CoinTransaction, PurchasedChapter, Bookmark, Chapter, Novel, SiteSetting, User):
        db.query(model).delete()


def seed_demo_data():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        clear_data(db)

        admin_email = settings.ADMIN_EMAIL or "admin@novelverse.com"
        admin_password = settings.ADMIN_PASSWORD or "admin1234"
        db.add(
            User(
                username="admin",
                email=admin_email,
                password_hash=get_password_hash(admin_password),
                role=UserRole.ADMIN.value,
                coins=10000,
            )
        )
        db.add(
            User(
                username="reader",
                email="reader@novelverse.com",
                password_hash=get_password_hash("reader1234"),
                role=UserRole.USER.value,
                coins=500,
            )
        )

        defaults = SiteSettings(show_demo_credentials=True, show_chapter_summary=True)
        db.add(SiteSetting(key=settings.SITE_SETTINGS_KEY, settings=defaults.model_dump(mode="json")))

        chapter_total = 0
        for title, author, tags, category, status, views, rating, featured in SAMPLE_NOVELS:
            novel = Novel(
                title=title,
                slug=slugify(title),
                author=author,
                description=f"{title} by {author}.",
                cover_url=f"https://picsum.photos/seed/{slugify(title)}/300/450",
                tags=tags,
                category=category,
                status=status,
                views=views,
                rating=rating,
                is_weekly_featured=featured,
            )
            db.add(novel)
            db.flush()

            for order in range(1, CHAPTERS_PER_NOVEL + 1):
                is_paid = order > FREE_CHAPTERS
                db.add(
                    Chapter(
                        novel_id=novel.id,
                        title=f"Chapter {order}",
                        content=f"<h2>Chapter {order}</h2><p>{title}, chapter {order}.</p>",
                        volume="Volume 1",
                        order=order,
                        is_paid=is_paid,
                        price=PAID_CHAPTER_PRICE if is_paid else 0,
                    )
                )
                chapter_total += 1

        db.commit()
        print(f"✅ 시드 데이터 생성 완료: 작품 {len(SAMPLE_NOVELS)}개, 회차 {chapter_total}개")
        print(f"👤 관리자: {admin_email}")
        print("👤 독자: reader@novelverse.com / reader1234")

    except Exception as e:
        db.rollback()
        print(f"❌ 시드 데이터 생성 실패: {str(e)}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo_data()
