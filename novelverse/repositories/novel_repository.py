from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from novelverse.models.chapter import Chapter as ChapterModel
from novelverse.models.comment import Comment as CommentModel
from novelverse.models.novel import Novel as NovelModel
from novelverse.models.purchased_chapter import PurchasedChapter as PurchasedChapterModel
from novelverse.models.bookmark import Bookmark as BookmarkModel
from novelverse.models.base import utcnow
from novelverse.schemas.novel import Novel as NovelSchema
from novelverse.repositories.base import BaseRepository


class NovelRepository(BaseRepository[NovelModel, NovelSchema]):
    """작품 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(NovelModel, NovelSchema, db)

    def get_by_id_or_slug(self, id_or_slug: str) -> Optional[NovelSchema]:
        model_instance = (
            self.db.query(self.model_class)
            .filter(
                or_(
                    self.model_class.id == id_or_slug,
                    self.model_class.slug == id_or_slug,
                )
            )
            .first()
        )
        return self._to_schema(model_instance)

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(self.model_class.id).filter(self.model_class.slug == slug)
        if exclude_id:
            query = query.filter(self.model_class.id != exclude_id)
        return query.first() is not None

    def list_novels(
        self,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[NovelSchema]:
        """최근 업데이트 순 작품 목록"""
        query = self.db.query(self.model_class)
        if category:
            query = query.filter(self.model_class.category == category)

        query = query.order_by(self.model_class.updated_at.desc())
        novels = self._to_schemas(query.all())

        # tags는 JSON 컬럼이라 DB 독립적으로 메모리에서 필터링
        if tag:
            needle = tag.lower()
            novels = [n for n in novels if any(t.lower() == needle for t in n.tags)]

        if offset:
            novels = novels[offset:]
        if limit:
            novels = novels[:limit]
        return novels

    def touch(self, novel_id: str, commit: bool = True) -> None:
        """updated_at 갱신 (새 회차 등록 시)"""
        self.db.query(self.model_class).filter(self.model_class.id == novel_id).update(
            {self.model_class.updated_at: utcnow()}, synchronize_session=False
        )
        self._commit(commit)

    def delete_with_chapters(self, novel_id: str) -> bool:
        """작품과 소속 회차, 구매/북마크/댓글 기록을 한 트랜잭션으로 삭제

        SQLite는 기본적으로 FK CASCADE를 수행하지 않으므로 명시적으로 지운다.
        원장(coin_transactions)은 불변이므로 건드리지 않는다.
        """
        instance = self._get_model(novel_id)
        if not instance:
            return False

        chapter_ids = self.db.query(ChapterModel.id).filter(
            ChapterModel.novel_id == novel_id
        )
        try:
            self.db.query(CommentModel).filter(
                or_(
                    CommentModel.novel_id == novel_id,
                    CommentModel.chapter_id.in_(chapter_ids.scalar_subquery()),
                )
            ).delete(synchronize_session=False)
            self.db.query(PurchasedChapterModel).filter(
                PurchasedChapterModel.chapter_id.in_(chapter_ids.scalar_subquery())
            ).delete(synchronize_session=False)
            self.db.query(ChapterModel).filter(ChapterModel.novel_id == novel_id).delete(
                synchronize_session=False
            )
            self.db.query(BookmarkModel).filter(BookmarkModel.novel_id == novel_id).delete(
                synchronize_session=False
            )
            self.db.delete(instance)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expire_all()
        return True

    def top_by_views(self, limit: int = 5) -> List[NovelSchema]:
        model_instances = (
            self.db.query(self.model_class)
            .order_by(self.model_class.views.desc())
            .limit(limit)
            .all()
        )
        return self._to_schemas(model_instances)

    def chapter_counts(self) -> List[Dict]:
        """작품별 회차 수"""
        rows = (
            self.db.query(
                self.model_class.id,
                self.model_class.title,
                func.count(ChapterModel.id),
            )
            .outerjoin(ChapterModel, ChapterModel.novel_id == self.model_class.id)
            .group_by(self.model_class.id, self.model_class.title)
            .order_by(self.model_class.title)
            .all()
        )
        return [
            {"id": novel_id, "title": title, "chapter_count": count}
            for novel_id, title, count in rows
        ]
