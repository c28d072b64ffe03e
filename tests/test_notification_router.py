from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from novelverse.models import Bookmark, Chapter, Notification, NotificationType, UserRole


def _chapter_payload(novel_id: str, title: str = "Ch 1") -> dict:
    return {"novel_id": novel_id, "title": title, "order": 1, "content": "text", "is_paid": False}


class TestNewChapterFanOut:
    """새 회차 알림 생성 테스트"""

    def test_bookmarkers_notified_on_chapter_create(self, client, db, auth_headers, make_user, make_novel):
        admin = make_user(role=UserRole.ADMIN)
        reader = make_user()
        inactive = make_user(is_active=False)
        stranger = make_user()
        nv = make_novel(title="Moonlit Sword")
        db.add_all([Bookmark(user_id=reader.id, novel_id=nv.id), Bookmark(user_id=inactive.id, novel_id=nv.id)])
        db.commit()

        created = client.post(
            "/api/v1/chapters", json=_chapter_payload(nv.id, "Dawn"), headers=auth_headers(admin)
        )
        assert created.status_code == 201
        chapter_id = created.json()["id"]

        body = client.get("/api/v1/notifications", headers=auth_headers(reader)).json()
        assert len(body) == 1
        assert body[0]["type"] == NotificationType.NEW_CHAPTER.value
        assert body[0]["title"] == "New Chapter Released!"
        assert body[0]["message"] == "Moonlit Sword - Dawn"
        assert body[0]["link"] == f"/reader/{nv.id}/{chapter_id}"
        assert body[0]["metadata"]["chapter_id"] == chapter_id
        assert body[0]["is_read"] is False

        assert client.get("/api/v1/notifications", headers=auth_headers(stranger)).json() == []
        db.expire_all()
        assert db.query(Notification).filter(Notification.user_id == inactive.id).count() == 0

    def test_notification_failure_rolls_back_chapter(self, client, db, auth_headers, make_user, make_novel):
        admin = make_user(role=UserRole.ADMIN)
        reader = make_user()
        nv = make_novel()
        db.add(Bookmark(user_id=reader.id, novel_id=nv.id))
        db.commit()

        with patch(
            "novelverse.repositories.notification_repository.NotificationRepository.create_many",
            side_effect=OperationalError("INSERT INTO notifications", {}, Exception("database is locked")),
        ):
            response = client.post(
                "/api/v1/chapters", json=_chapter_payload(nv.id), headers=auth_headers(admin)
            )

        assert response.status_code == 500
        db.expire_all()
        assert db.query(Chapter).filter(Chapter.novel_id == nv.id).count() == 0
        assert db.query(Notification).count() == 0


class TestNotificationRoutes:
    """알림 조회/읽음/삭제 라우터 테스트"""

    def _notify(self, db, user, count: int = 1):
        rows = [
            Notification(
                user_id=user.id,
                type=NotificationType.SYSTEM_ANNOUNCEMENT.value,
                title=f"Notice {n}",
                message="Hello",
                link="/",
            )
            for n in range(count)
        ]
        db.add_all(rows)
        db.commit()
        return rows

    def test_unread_count_and_mark_read(self, client, db, auth_headers, make_user):
        user = make_user()
        first, _ = self._notify(db, user, count=2)

        assert client.get("/api/v1/notifications/unread-count", headers=auth_headers(user)).json() == {"count": 2}

        response = client.put(f"/api/v1/notifications/{first.id}/read", headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["is_read"] is True
        assert client.get("/api/v1/notifications/unread-count", headers=auth_headers(user)).json() == {"count": 1}

    def test_mark_all_read(self, client, db, auth_headers, make_user):
        user = make_user()
        other = make_user()
        self._notify(db, user, count=3)
        self._notify(db, other)

        response = client.put("/api/v1/notifications/read-all", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json() == {"success": True, "msg": "All notifications marked as read"}
        assert client.get("/api/v1/notifications/unread-count", headers=auth_headers(user)).json() == {"count": 0}
        assert client.get("/api/v1/notifications/unread-count", headers=auth_headers(other)).json() == {"count": 1}

    def test_delete_notification(self, client, db, auth_headers, make_user):
        user = make_user()
        (notification,) = self._notify(db, user)

        response = client.delete(f"/api/v1/notifications/{notification.id}", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["msg"] == "Notification deleted"
        assert client.get("/api/v1/notifications", headers=auth_headers(user)).json() == []

    def test_other_users_notification_not_found(self, client, db, auth_headers, make_user):
        owner = make_user()
        intruder = make_user()
        (notification,) = self._notify(db, owner)

        read = client.put(f"/api/v1/notifications/{notification.id}/read", headers=auth_headers(intruder))
        deleted = client.delete(f"/api/v1/notifications/{notification.id}", headers=auth_headers(intruder))

        assert read.status_code == 404
        assert read.json()["error"]["code"] == "NOT_FOUND_001"
        assert deleted.status_code == 404
        db.expire_all()
        assert db.get(Notification, notification.id).is_read is False

    def test_pagination(self, client, db, auth_headers, make_user):
        user = make_user()
        self._notify(db, user, count=5)

        page = client.get("/api/v1/notifications?limit=2&offset=1", headers=auth_headers(user))

        assert page.status_code == 200
        assert len(page.json()) == 2
        assert client.get("/api/v1/notifications?limit=0", headers=auth_headers(user)).status_code == 400

    def test_requires_login(self, client):
        assert client.get("/api/v1/notifications").status_code == 401


class TestAnnouncement:
    """관리자 공지 테스트"""

    def test_requires_admin(self, client, auth_headers, make_user):
        response = client.post(
            "/api/v1/notifications/announcement",
            json={"title": "Maintenance", "message": "Tonight"},
            headers=auth_headers(make_user()),
        )
        assert response.status_code == 403

    def test_reaches_all_active_users(self, client, db, auth_headers, make_user):
        admin = make_user(role=UserRole.ADMIN)
        readers = [make_user(), make_user()]
        inactive = make_user(is_active=False)

        response = client.post(
            "/api/v1/notifications/announcement",
            json={"title": "Maintenance", "message": "Tonight"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["recipients"] == 3
        for reader in readers:
            body = client.get("/api/v1/notifications", headers=auth_headers(reader)).json()
            assert [n["title"] for n in body] == ["Maintenance"]
            assert body[0]["type"] == "system_announcement"
        db.expire_all()
        assert db.query(Notification).filter(Notification.user_id == inactive.id).count() == 0
