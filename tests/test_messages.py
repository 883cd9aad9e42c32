from fastapi import status


def send(client, sender, receiver, content):
    return client.post(
        "/api/messages",
        json={"senderCompanyId": sender, "receiverCompanyId": receiver, "content": content},
    )


def test_message_is_listed_once_for_each_side(client, acme, globex):
    response = send(client, acme, globex, "Hello Globex")
    assert response.status_code == status.HTTP_200_OK
    message = response.json()
    assert message["senderCompanyId"] == acme
    assert message["receiverCompanyId"] == globex
    assert message["createdAt"] is not None

    for company in (acme, globex):
        listed = client.get("/api/messages", params={"companyId": company}).json()
        assert [m["id"] for m in listed] == [message["id"]]
        assert listed[0]["senderName"] == "Acme"
        assert listed[0]["receiverName"] == "Globex"


def test_messages_are_oldest_first(client, acme, globex):
    first = send(client, acme, globex, "one").json()["id"]
    second = send(client, globex, acme, "two").json()["id"]
    listed = client.get("/api/messages", params={"companyId": acme}).json()
    assert [m["id"] for m in listed] == [first, second]


def test_messages_of_other_companies_are_hidden(client, acme, globex, make_company):
    initech = make_company("Initech")
    send(client, globex, initech, "private")
    assert client.get("/api/messages", params={"companyId": acme}).json() == []


def test_list_requires_company(client):
    response = client.get("/api/messages")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "companyId is required."}


def test_send_validation(client, acme):
    missing = client.post("/api/messages", json={"senderCompanyId": acme, "content": "Hi"})
    assert missing.status_code == status.HTTP_400_BAD_REQUEST
    assert missing.json() == {"message": "senderCompanyId, receiverCompanyId and content are required."}

    unknown = send(client, acme, 9999, "Hi")
    assert unknown.status_code == status.HTTP_404_NOT_FOUND
    assert unknown.json() == {"message": "Company not found."}


def test_conversations_group_by_counterpart(client, acme, globex, make_company):
    initech = make_company("Initech")
    send(client, acme, globex, "one")
    send(client, initech, acme, "two")
    send(client, globex, acme, "three")

    conversations = client.get("/api/messages/conversations", params={"companyId": acme}).json()
    assert [c["company"] for c in conversations] == ["Globex", "Initech"]

    globex_thread = conversations[0]
    assert globex_thread["companyId"] == globex
    assert globex_thread["messageCount"] == 2
    assert globex_thread["lastMessage"] == "three"
    assert globex_thread["lastSenderCompanyId"] == globex
    assert conversations[1]["messageCount"] == 1
