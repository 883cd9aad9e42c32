from fastapi import status

from app.core.schema_catalog import INTRANET_TABLES


def test_summary(client, acme, globex, acme_user):
    post_id = client.post("/api/forum/posts", json={"title": "Launch", "companyId": acme}).json()["id"]
    client.post(f"/api/forum/posts/{post_id}/comments", json={"content": "Well done", "companyId": globex})

    response = client.get("/api/admin/summary")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["stats"] == {"users": 1, "companies": 2, "posts": 1, "comments": 1}
    assert data["recentPosts"][0]["title"] == "Launch"
    assert data["recentPosts"][0]["company"] == "Acme"

    activity = data["activity"][0]
    assert activity["title"] == "Globex"
    assert activity["note"] == "Well done"
    assert activity["tag"] == "Launch"
    assert activity["time"]


def test_posts_dashboard(client, acme, globex):
    for i in range(14):
        client.post("/api/forum/posts", json={"title": f"Post {i}", "category": "news", "companyId": acme})

    posts = client.get("/api/admin/posts").json()
    assert len(posts) == 12
    assert posts[0]["title"] == "Post 13"
    assert posts[0]["company"] == "Acme"
    assert posts[0]["category"] == "news"
    assert posts[0]["views"] == 0
    assert posts[0]["comments"] == 0


def test_users_dashboard(client, acme, make_user):
    first = make_user("first@acme.test", company_id=acme, name="First")
    second = make_user("second@acme.test")

    users = client.get("/api/admin/users").json()
    assert [u["id"] for u in users] == [second, first]
    assert users[0]["company"] is None
    assert users[1]["company"] == "Acme"
    assert users[1]["role"] == "company"
    assert users[1]["name"] == "First"


def test_messages_dashboard(client, acme, globex):
    post_id = client.post("/api/forum/posts", json={"title": "Launch", "companyId": acme}).json()["id"]
    comment = client.post(
        f"/api/forum/posts/{post_id}/comments", json={"content": "Well done", "companyId": globex}
    ).json()

    inbox = client.get("/api/admin/messages").json()
    assert inbox == [
        {
            "id": comment["id"],
            "from": "Globex",
            "subject": "Launch",
            "createdAt": inbox[0]["createdAt"],
            "preview": "Well done",
        }
    ]


def test_schema_refresh(client):
    response = client.post("/api/admin/schema/refresh")
    assert response.status_code == status.HTTP_200_OK
    tables = response.json()["tables"]
    assert set(tables) == set(INTRANET_TABLES)
    assert "companyId" in tables["User"]
