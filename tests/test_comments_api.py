import pytest


@pytest.fixture
def alice(signup):
    return signup("alice")


@pytest.fixture
def bob(signup):
    return signup("bob")


@pytest.fixture
def post_id(alice):
    r = alice.post("/post", json={"title": "Hello", "content": "First post"})
    assert r.status_code == 200
    return r.json()["post_id"]


def _comment(client, post_id, **extra):
    return client.post(
        f"/posts/{post_id}/commentaire",
        json={"title": "Re", "content": "Nice", **extra},
    )


def test_create_comment(alice, bob, post_id):
    bob_id = bob.get("/me").json()["user"]["user_id"]
    r = _comment(bob, post_id, postId=post_id)
    assert r.status_code == 200
    body = r.json()
    assert body["post_id"] == post_id
    assert body["user_id"] == bob_id
    assert body["content"] == "Nice"


def test_english_route_alias(alice, post_id):
    r = alice.post(f"/posts/{post_id}/comments", json={"title": "Re", "content": "Nice"})
    assert r.status_code == 200
    assert r.json()["post_id"] == post_id


def test_comment_on_missing_post_is_404(alice):
    r = _comment(alice, 9999)
    assert r.status_code == 404
    assert r.json() == {"detail": "post_not_found"}


def test_comment_post_id_must_match_route(alice, post_id):
    r = _comment(alice, post_id, postId=post_id + 1)
    assert r.status_code == 400
    assert r.json() == {"detail": "post_id_mismatch"}


def test_comment_requires_valid_post_id(alice):
    r = alice.post("/posts/not-a-number/commentaire", json={"title": "Re", "content": "Nice"})
    assert r.status_code == 400


def test_comment_requires_auth(client, post_id):
    assert _comment(client, post_id).status_code == 401


def test_read_comment_owner_only(alice, bob, post_id, admin_client):
    comment_id = _comment(bob, post_id).json()["comment_id"]
    assert bob.get(f"/comment/{comment_id}").status_code == 200
    assert alice.get(f"/comment/{comment_id}").status_code == 404
    assert admin_client.get(f"/comment/{comment_id}").status_code == 404


def test_list_comments_scoped(alice, bob, post_id, admin_client):
    _comment(alice, post_id, title="a")
    _comment(bob, post_id, title="b")

    assert [c["title"] for c in alice.get("/comments").json()] == ["a"]
    assert [c["title"] for c in bob.get("/comments").json()] == ["b"]
    assert [c["title"] for c in admin_client.get("/comments").json()] == ["a", "b"]


def test_post_owner_sees_all_comments_on_post(alice, bob, post_id):
    _comment(alice, post_id, title="a")
    _comment(bob, post_id, title="b")

    r = alice.get(f"/posts/{post_id}/comments")
    assert r.status_code == 200
    assert [c["title"] for c in r.json()] == ["a", "b"]
    assert bob.get(f"/posts/{post_id}/comments").status_code == 404


def test_delete_comment_rules(alice, bob, post_id, admin_client):
    by_bob = _comment(bob, post_id).json()["comment_id"]
    by_alice = _comment(alice, post_id).json()["comment_id"]

    # The post owner is not the comment owner.
    r = alice.delete(f"/comments/{by_bob}")
    assert r.status_code == 403
    assert bob.get(f"/comment/{by_bob}").status_code == 200

    r = bob.delete(f"/comments/{by_bob}")
    assert r.status_code == 200
    assert r.json() == {"message": "comment_deleted", "id": by_bob}
    assert bob.get(f"/comment/{by_bob}").status_code == 404
    assert bob.delete(f"/comments/{by_bob}").status_code == 404

    assert admin_client.delete(f"/comments/{by_alice}").status_code == 200
    assert alice.get(f"/comment/{by_alice}").status_code == 404


def test_deleting_post_removes_comments(alice, bob, post_id):
    comment_id = _comment(bob, post_id).json()["comment_id"]
    assert alice.delete(f"/posts/{post_id}").status_code == 200
    assert bob.get(f"/comment/{comment_id}").status_code == 404
