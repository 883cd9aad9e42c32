from fastapi import status

from app.models import Comment, Company, Message, Post, User, UserSettings


def test_list_companies_includes_counts_and_admin(client, acme, globex, make_user):
    make_user("b@acme.test", company_id=acme)
    make_user("a@acme.test", company_id=acme)

    response = client.get("/api/admin/companies")
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["Cache-Control"] == "no-store"

    companies = response.json()
    assert [c["name"] for c in companies] == ["Acme", "Globex"]
    acme_row = companies[0]
    assert acme_row["employees"] == 2
    assert acme_row["admin"] == "a@acme.test"
    assert acme_row["industry"] == "Manufacturing"
    assert acme_row["website"] is None
    assert companies[1]["employees"] == 0
    assert companies[1]["admin"] is None


def test_get_company(client, acme):
    response = client.get(f"/api/admin/companies/{acme}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["location"] == "Lyon"

    missing = client.get("/api/admin/companies/9999")
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json() == {"message": "Company not found."}


def test_create_company_requires_name(client):
    response = client.post("/api/admin/companies", json={"industry": "Retail"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "name is required."}

    blank = client.post("/api/admin/companies", json={"name": "   "})
    assert blank.status_code == status.HTTP_400_BAD_REQUEST


def test_create_company_stores_blank_fields_as_null(client):
    response = client.post(
        "/api/admin/companies",
        json={"name": "  Initech ", "industry": "Software", "website": ""},
    )
    assert response.status_code == status.HTTP_200_OK
    company = response.json()
    assert company["name"] == "Initech"
    assert company["industry"] == "Software"
    assert company["website"] is None
    assert company["updatedAt"] is not None


def test_create_company_with_member_account(client, db_session):
    response = client.post(
        "/api/admin/companies",
        json={"name": "Initech", "email": "hello@initech.test", "password": "Secret123!"},
    )
    assert response.status_code == status.HTTP_200_OK
    company_id = response.json()["id"]

    user = db_session.query(User).filter(User.email == "hello@initech.test").one()
    assert user.company_id == company_id
    assert user.password != "Secret123!"

    login = client.post(
        "/api/auth/login",
        json={"email": "hello@initech.test", "password": "Secret123!", "role": "company"},
    )
    assert login.status_code == status.HTTP_200_OK
    assert login.json()["user"]["companyId"] == company_id


def test_create_company_with_duplicate_email_rolls_back(client, db_session, acme_user):
    response = client.post(
        "/api/admin/companies",
        json={"name": "Copycat", "email": "CONTACT@acme.test", "password": "Secret123!"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "Email already exists."}
    assert db_session.query(Company).filter(Company.name == "Copycat").count() == 0


def test_update_company(client, acme):
    response = client.put(f"/api/admin/companies/{acme}", json={"website": "https://acme.test", "location": ""})
    assert response.status_code == status.HTTP_200_OK
    company = response.json()
    assert company["website"] == "https://acme.test"
    assert company["location"] is None
    assert company["industry"] == "Manufacturing"


def test_update_company_errors(client, acme):
    empty = client.put(f"/api/admin/companies/{acme}", json={})
    assert empty.status_code == status.HTTP_400_BAD_REQUEST
    assert empty.json() == {"message": "No fields to update."}

    blank_name = client.put(f"/api/admin/companies/{acme}", json={"name": ""})
    assert blank_name.status_code == status.HTTP_400_BAD_REQUEST
    assert blank_name.json() == {"message": "name is required."}

    missing = client.put("/api/admin/companies/9999", json={"name": "Ghost"})
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json() == {"message": "Company not found."}


def test_delete_company_cascades(client, db_session, acme, globex, acme_user, make_user):
    globex_user = make_user("ops@globex.test", company_id=globex)

    acme_post = client.post("/api/forum/posts", json={"title": "Acme news", "companyId": acme}).json()["id"]
    globex_post = client.post("/api/forum/posts", json={"title": "Globex news", "companyId": globex}).json()["id"]
    # Comments in both directions
    client.post(f"/api/forum/posts/{acme_post}/comments", json={"content": "Congrats", "companyId": globex})
    client.post(f"/api/forum/posts/{globex_post}/comments", json={"content": "Nice", "companyId": acme})
    client.post(f"/api/forum/posts/{globex_post}/comments", json={"content": "Thanks", "companyId": globex})
    client.post("/api/messages", json={"senderCompanyId": acme, "receiverCompanyId": globex, "content": "Hi"})
    client.post("/api/messages", json={"senderCompanyId": globex, "receiverCompanyId": acme, "content": "Hey"})
    client.put("/api/settings/notifications", json={"userId": acme_user, "notifications": {"email": True}})
    client.put("/api/settings/notifications", json={"userId": globex_user, "notifications": {"email": False}})

    response = client.delete(f"/api/admin/companies/{acme}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"id": acme}

    db_session.expire_all()
    assert db_session.query(Company).filter(Company.id == acme).count() == 0
    assert db_session.query(User).filter(User.company_id == acme).count() == 0
    assert db_session.query(Post).filter(Post.author_id == acme).count() == 0
    assert db_session.query(Comment).filter(Comment.author_id == acme).count() == 0
    assert db_session.query(Comment).filter(Comment.post_id == acme_post).count() == 0
    assert db_session.query(Message).count() == 0
    assert db_session.query(UserSettings).filter(UserSettings.user_id == acme_user).count() == 0

    # Globex keeps its own content
    assert db_session.query(Post).filter(Post.id == globex_post).count() == 1
    assert db_session.query(Comment).filter(Comment.post_id == globex_post).count() == 1
    assert db_session.query(UserSettings).filter(UserSettings.user_id == globex_user).count() == 1


def test_delete_unknown_company(client):
    response = client.delete("/api/admin/companies/9999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"message": "Company not found."}


def test_directory_listing_omits_admin(client, acme):
    response = client.get("/api/companies")
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["Cache-Control"] == "no-store"
    company = response.json()[0]
    assert company["name"] == "Acme"
    assert "admin" not in company
    assert company["employees"] == 0


def test_blank_email_creates_no_member_account(client, db_session):
    for name in ("Blank One", "Blank Two"):
        response = client.post(
            "/api/admin/companies",
            json={"name": name, "email": "   ", "password": "Secret123!"},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] is None
    assert db_session.query(User).count() == 0


def test_update_company_strips_name(client, acme):
    blank = client.put(f"/api/admin/companies/{acme}", json={"name": "   "})
    assert blank.status_code == status.HTTP_400_BAD_REQUEST
    assert blank.json() == {"message": "name is required."}

    renamed = client.put(f"/api/admin/companies/{acme}", json={"name": "  Acme Corp "})
    assert renamed.status_code == status.HTTP_200_OK
    assert renamed.json()["name"] == "Acme Corp"
