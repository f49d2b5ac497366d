import pytest


@pytest.fixture
def user_id(alice):
    return alice["user"]["id"]


@pytest.fixture
def post(client, user_id):
    res = client.post("/posts", json={"message": "hello world", "userId": user_id})
    assert res.status_code == 201
    return res.get_json()


def test_create_post(post, user_id):
    assert post["message"] == "hello world"
    assert post["userId"] == user_id
    assert post["id"]


def test_create_post_validation(client, user_id):
    assert client.post("/posts", json={"message": "x"}).status_code == 400
    assert client.post("/posts", json={"userId": user_id}).status_code == 400
    res = client.post("/posts", json={"message": "x", "userId": "nobody"})
    assert res.status_code == 400
    assert res.get_json()["message"] == "invalid userId"


def test_list_posts_filtered_by_user(client, post, user_id):
    other = client.post(
        "/users", json={"username": "bob", "email": "b@x.com", "password": "hunter22"}
    ).get_json()
    client.post("/posts", json={"message": "bob here", "userId": other["id"]})

    assert len(client.get("/posts").get_json()) == 2
    mine = client.get(f"/posts?userId={user_id}").get_json()
    assert [p["message"] for p in mine] == ["hello world"]


def test_get_update_delete_post(client, post, user_id):
    url = f"/posts/{post['id']}"
    assert client.get(url).get_json()["message"] == "hello world"

    res = client.put(url, json={"message": "edited", "userId": user_id})
    assert res.status_code == 200
    assert res.get_json()["message"] == "edited"

    assert client.put(url, json={"message": "edited"}).status_code == 400

    res = client.delete(url)
    assert res.status_code == 200
    assert res.get_json() == {"message": "post deleted successfully", "postId": post["id"]}
    assert client.get(url).status_code == 404


def test_missing_post(client):
    res = client.get("/posts/missing")
    assert res.status_code == 404
    assert res.get_json()["message"] == "post not found"
    assert client.delete("/posts/missing").status_code == 404


def test_comment_lifecycle(client, post):
    res = client.post("/comments", json={"postId": post["id"], "sender": "bob", "content": "nice"})
    assert res.status_code == 201
    comment = res.get_json()
    assert comment["postId"] == post["id"]

    assert len(client.get("/comments").get_json()) == 1
    assert client.get(f"/comments/post/{post['id']}").get_json()[0]["id"] == comment["id"]
    assert client.get("/comments/post/other").get_json() == []

    url = f"/comments/{comment['id']}"
    res = client.put(url, json={"content": "very nice"})
    assert res.status_code == 200
    assert res.get_json()["content"] == "very nice"
    assert res.get_json()["sender"] == "bob"

    res = client.delete(url)
    assert res.status_code == 200
    assert res.get_json() == {"message": "Comment deleted"}
    assert client.get(url).status_code == 404


def test_comment_validation(client, post):
    assert client.post("/comments", json={"postId": post["id"], "sender": "bob"}).status_code == 400
    res = client.post("/comments", json={"postId": "missing", "sender": "bob", "content": "hi"})
    assert res.status_code == 400
    assert res.get_json()["message"] == "invalid postId"


def test_missing_comment(client):
    res = client.get("/comments/missing")
    assert res.status_code == 404
    assert res.get_json()["message"] == "Comment not found"


def test_health_and_unknown_route(client):
    assert client.get("/health").get_json()["status"] == "ok"
    res = client.get("/nowhere")
    assert res.status_code == 404
    assert res.get_json()["error"] == "NOT_FOUND"


def test_database_health(client):
    res = client.get("/health/db")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok", "database": "up"}
