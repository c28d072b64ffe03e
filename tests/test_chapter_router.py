from novelverse.models import Novel, UserRole


class TestReadChapter:
    """회차 조회 라우터 테스트"""

    def test_anonymous_gets_locked_paid_chapter(self, client, make_novel, make_chapter):
        ch = make_chapter(make_novel(), price=10)

        response = client.get(f"/api/v1/chapters/{ch.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["content"] is None
        assert body["access"] == {"locked": True, "effective_price": 10, "reason": "login_required"}

    def test_anonymous_reads_free_chapter_with_payments_off(self, client, set_payments, make_novel, make_chapter):
        set_payments(False)
        ch = make_chapter(make_novel(), is_paid=False, price=0)

        body = client.get(f"/api/v1/chapters/{ch.id}").json()

        assert body["access"]["locked"] is False
        assert body["content"] == ch.content

    def test_signed_in_user_sees_purchase_required(self, client, auth_headers, make_user, make_novel, make_chapter):
        user = make_user(coins=0)
        ch = make_chapter(make_novel(offer_price=4), price=10)

        body = client.get(f"/api/v1/chapters/{ch.id}", headers=auth_headers(user)).json()

        assert body["content"] is None
        assert body["access"]["reason"] == "purchase_required"
        assert body["access"]["effective_price"] == 4

    def test_admin_reads_everything(self, client, auth_headers, make_user, make_novel, make_chapter):
        admin = make_user(role=UserRole.ADMIN)
        ch = make_chapter(make_novel(), price=10)

        body = client.get(f"/api/v1/chapters/{ch.id}", headers=auth_headers(admin)).json()

        assert body["content"] == ch.content
        assert body["access"]["reason"] == "admin"

    def test_invalid_token_is_treated_as_anonymous(self, client, make_novel, make_chapter):
        ch = make_chapter(make_novel(), price=10)

        response = client.get(
            f"/api/v1/chapters/{ch.id}", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 200
        assert response.json()["access"]["reason"] == "login_required"

    def test_missing_chapter(self, client):
        response = client.get("/api/v1/chapters/does-not-exist")
        assert response.status_code == 404
        assert response.json()["msg"] == "Chapter not found"


class TestTableOfContents:
    def test_lock_states_follow_ownership(self, client, auth_headers, make_user, make_novel, make_chapter):
        # Given: 무료 1화, 유료 2화/3화 중 2화만 구매
        user = make_user(coins=10)
        nv = make_novel()
        free = make_chapter(nv, is_paid=False, price=0, order=1)
        owned = make_chapter(nv, price=5, order=2)
        locked = make_chapter(nv, price=5, order=3)
        assert client.post(f"/api/v1/users/purchase/{owned.id}", headers=auth_headers(user)).status_code == 200

        # When
        response = client.get(f"/api/v1/chapters/novel/{nv.id}", headers=auth_headers(user))

        # Then
        assert response.status_code == 200
        toc = response.json()
        assert [c["id"] for c in toc] == [free.id, owned.id, locked.id]
        assert [c["access"]["reason"] for c in toc] == ["free", "owned", "purchase_required"]
        assert all("content" not in c for c in toc)

    def test_unknown_novel(self, client):
        assert client.get("/api/v1/chapters/novel/nope").status_code == 404


class TestChapterAdmin:
    def test_create_requires_admin(self, client, auth_headers, make_user, make_novel):
        user = make_user()
        nv = make_novel()
        response = client.post(
            "/api/v1/chapters",
            json={"novel_id": nv.id, "title": "Ch", "order": 1, "content": "text"},
            headers=auth_headers(user),
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTH_002"

    def test_admin_crud_touches_novel(self, client, db, auth_headers, make_user, make_novel):
        admin = make_user(role=UserRole.ADMIN)
        nv = make_novel()
        db.expire_all()
        before = db.get(Novel, nv.id).updated_at

        created = client.post(
            "/api/v1/chapters",
            json={"novel_id": nv.id, "title": "Ch 1", "order": 1, "content": "text", "is_paid": True, "price": 3},
            headers=auth_headers(admin),
        )
        assert created.status_code == 201
        chapter_id = created.json()["id"]

        db.expire_all()
        assert db.get(Novel, nv.id).updated_at >= before

        updated = client.put(
            f"/api/v1/chapters/{chapter_id}", json={"price": 7}, headers=auth_headers(admin)
        )
        assert updated.status_code == 200
        assert updated.json()["price"] == 7

        deleted = client.delete(f"/api/v1/chapters/{chapter_id}", headers=auth_headers(admin))
        assert deleted.status_code == 200
        assert client.get(f"/api/v1/chapters/{chapter_id}").status_code == 404

    def test_negative_price_rejected(self, client, auth_headers, make_user, make_novel):
        admin = make_user(role=UserRole.ADMIN)
        nv = make_novel()
        response = client.post(
            "/api/v1/chapters",
            json={"novel_id": nv.id, "title": "Ch", "order": 1, "price": -1},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400
