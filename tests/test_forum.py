from fastapi import status

from app.models import Comment, Post


def test_create_post_with_company(client, acme):
    response = client.post(
        "/api/forum/posts",
        json={"title": "Quarterly update", "content": "All good", "category": "news", "companyId": acme},
    )
    assert response.status_code == status.HTTP_200_OK
    post = response.json()
    assert post["title"] == "Quarterly update"
    assert post["content"] == "All good"
    assert post["category"] == "news"
    assert post["companyId"] == acme
    assert post["comments"] == 0
    assert post["createdAt"] is not None


def test_create_post_falls_back_to_user_company(client, acme, acme_user):
    response = client.post("/api/forum/posts", json={"title": "Hello", "userId": acme_user})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["companyId"] == acme


def test_create_post_without_company_fails(client, db_session, make_user):
    loner = make_user("loner@nowhere.test")

    for body in ({"title": "Orphan"}, {"title": "Orphan", "userId": loner}, {"title": "Orphan", "userId": 9999}):
        response = client.post("/api/forum/posts", json=body)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"message": "Company is required to create a post."}
    assert db_session.query(Post).count() == 0


def test_create_post_validation(client, acme):
    no_title = client.post("/api/forum/posts", json={"companyId": acme})
    assert no_title.status_code == status.HTTP_400_BAD_REQUEST
    assert no_title.json() == {"message": "Title is required."}

    unknown = client.post("/api/forum/posts", json={"title": "Ghost", "companyId": 9999})
    assert unknown.status_code == status.HTTP_400_BAD_REQUEST
    assert unknown.json() == {"message": "Company not found."}


def test_list_posts_newest_first_with_comment_counts(client, acme, globex):
    first = client.post("/api/forum/posts", json={"title": "First", "companyId": acme}).json()["id"]
    second = client.post("/api/forum/posts", json={"title": "Second", "companyId": globex}).json()["id"]
    client.post(f"/api/forum/posts/{first}/comments", json={"content": "Reply", "companyId": globex})

    posts = client.get("/api/forum/posts").json()
    assert [p["id"] for p in posts] == [second, first]
    assert posts[0]["company"] == "Globex"
    assert posts[1]["comments"] == 1
    assert posts[1]["content"] == ""


def test_comments_round_trip(client, acme, globex):
    post_id = client.post("/api/forum/posts", json={"title": "Topic", "companyId": acme}).json()["id"]

    created = client.post(f"/api/forum/posts/{post_id}/comments", json={"content": "First!", "companyId": globex})
    assert created.status_code == status.HTTP_200_OK
    comment = created.json()
    assert comment["company"] == "Globex"
    assert comment["companyId"] == globex
    assert comment["postId"] == post_id

    client.post(f"/api/forum/posts/{post_id}/comments", json={"content": "Second", "companyId": acme})
    comments = client.get(f"/api/forum/posts/{post_id}/comments").json()
    assert [c["content"] for c in comments] == ["First!", "Second"]
    assert [c["company"] for c in comments] == ["Globex", "Acme"]


def test_create_comment_validation(client, db_session, acme):
    post_id = client.post("/api/forum/posts", json={"title": "Topic", "companyId": acme}).json()["id"]

    no_content = client.post(f"/api/forum/posts/{post_id}/comments", json={"companyId": acme})
    assert no_content.status_code == status.HTTP_400_BAD_REQUEST
    assert no_content.json() == {"message": "Post and content are required."}

    no_company = client.post(f"/api/forum/posts/{post_id}/comments", json={"content": "Hi"})
    assert no_company.status_code == status.HTTP_400_BAD_REQUEST
    assert no_company.json() == {"message": "Company is required to comment."}

    unknown_company = client.post(f"/api/forum/posts/{post_id}/comments", json={"content": "Hi", "companyId": 9999})
    assert unknown_company.status_code == status.HTTP_400_BAD_REQUEST
    assert unknown_company.json() == {"message": "Company not found."}

    unknown_post = client.post("/api/forum/posts/9999/comments", json={"content": "Hi", "companyId": acme})
    assert unknown_post.status_code == status.HTTP_404_NOT_FOUND
    assert unknown_post.json() == {"message": "Post not found."}

    assert db_session.query(Comment).count() == 0


def test_delete_post_removes_comments(client, db_session, acme, globex):
    post_id = client.post("/api/forum/posts", json={"title": "Topic", "companyId": acme}).json()["id"]
    client.post(f"/api/forum/posts/{post_id}/comments", json={"content": "Hi", "companyId": globex})

    response = client.delete(f"/api/forum/posts/{post_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"id": post_id}
    assert db_session.query(Comment).count() == 0

    again = client.delete(f"/api/forum/posts/{post_id}")
    assert again.status_code == status.HTTP_404_NOT_FOUND
    assert again.json() == {"message": "Post not found."}
