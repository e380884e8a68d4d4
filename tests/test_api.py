
def test_admin_header_is_required(client):
    anonymous = client.get("/api/users", headers={"X-Admin-Email": ""})
    stranger = client.get("/api/users", headers={"X-Admin-Email": "someone@gymvisa.com"})

    for response in (anonymous, stranger):
        assert response.status_code == 401
        assert response.json()["code"] == "AUTHENTICATION_FAILED"


def test_admin_email_is_case_insensitive(client):
    response = client.get("/api/users", headers={"X-Admin-Email": "Admin@GymVisa.com"})
    assert response.status_code == 200


def test_liveness_needs_no_session(client):
    response = client.get("/live", headers={"X-Admin-Email": ""})
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_create_user(client, database):
    response = client.post("/api/create-user", json={
        "email": "jane@example.com",
        "password": "secret1",
        "name": "Jane",
        "phoneNo": "+923001234567",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["userData"]["Email"] == "jane@example.com"
    assert body["userData"]["PhoneNo"] == "+923001234567"
    assert database.users.documents[0]["_id"] == body["uid"]

    duplicate = client.post("/api/create-user", json={"email": "JANE@example.com", "password": "secret1", "name": "J"})
    assert duplicate.status_code == 400
    assert duplicate.json()["code"] == "DUPLICATE_EMAIL"


def test_create_user_missing_field(client):
    response = client.post("/api/create-user", json={"email": "jane@example.com", "password": "secret1"})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_create_org_users_partial_success(client, email_sender):
    client.post("/api/create-user", json={"email": "taken@acme.com", "password": "secret1", "name": "Taken"})

    response = client.post("/api/create-org-users", json={
        "orgName": "Acme",
        "users": [
            {"email": "one@acme.com", "name": "One"},
            {"email": "taken@acme.com", "name": "Two"},
            {"email": "three@acme.com", "name": "Three"},
        ],
    })

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Created 2 users successfully"
    assert len(body["results"]) == 2
    assert len(body["errors"]) == 1
    assert body["emailResults"] == {"emailsSent": 2, "emailsFailed": 0}
    assert [message["To"] for message in email_sender.messages] == ["one@acme.com", "three@acme.com"]


def test_create_org_users_nothing_created(client):
    response = client.post("/api/create-org-users", json={
        "orgName": "Acme",
        "users": [{"email": "", "name": "Nobody"}],
    })

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "BATCH_FAILED"
    assert body["errors"] == ["User missing email or name: Nobody"]


def test_delete_organization(client):
    client.post("/api/create-org-users", json={"orgName": "Acme", "users": [{"email": "one@acme.com", "name": "One"}]})

    response = client.request("DELETE", "/api/delete-organization", json={"organizationName": "Acme"})
    missing = client.request("DELETE", "/api/delete-organization", json={"organizationName": "Acme"})

    assert response.status_code == 200
    assert response.json()["message"] == 'Successfully deleted organization "Acme" and 1 associated users'
    assert missing.status_code == 404


def test_reset_password(client):
    unknown = client.post("/api/reset-password", json={"email": "ghost@acme.com"})
    assert unknown.status_code == 404

    client.post("/api/create-user", json={"email": "jane@example.com", "password": "secret1", "name": "Jane"})
    response = client.post("/api/reset-password", json={"email": "jane@example.com"})

    assert response.status_code == 200
    assert len(response.json()["password"]) == 12


def test_send_notification_reports_per_token_failures(client, push_gateway):
    push_gateway.unregistered.add("stale-token-0123456789abcdef")

    response = client.post("/api/send-notification", json={
        "tokens": ["good-token-0123456789abcdef", "stale-token-0123456789abcdef"],
        "notification": {"title": "New gyms", "body": "Three new gyms", "data": {"screen": "gyms"}},
    })

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Notification sent to 1 users"
    assert body["results"]["failed"] == 1
    assert body["results"]["details"]["errors"][0]["invalidToken"] is True


def test_send_notification_requires_tokens(client):
    response = client.post("/api/send-notification", json={
        "tokens": [],
        "notification": {"title": "Hi", "body": "There"},
    })

    assert response.status_code == 422


def test_prune_push_tokens(client, database):
    database.users.documents.append({"_id": "u1", "Name": "One", "FCMToken": "stale"})

    response = client.post("/api/users/prune-push-tokens", json={"tokens": ["stale"]})

    assert response.json() == {"success": True, "cleared": 1}
    assert client.get("/api/users/with-push-tokens").json() == {"users": []}


def test_gym_lifecycle(client):
    created = client.post("/api/gyms", json={"name": "Iron Temple", "city": "Lahore"})
    assert created.status_code == 201
    gym_id = created.json()["gym"]["id"]

    code = client.get(f"/api/gyms/{gym_id}/qr-code").json()
    assert code["gymId"] == gym_id
    assert code["qrCodeUrl"].startswith("data:image/png;base64,")

    edited = client.post(f"/api/gyms/{gym_id}/operating-hours/edit", json={
        "gender": "female", "day": "monday", "field": "open", "value": "07:00",
    })
    assert edited.status_code == 200
    assert edited.json()["operatingHours"]["male"]["monday"]["open"] == "07:00"

    invalid = client.post(f"/api/gyms/{gym_id}/operating-hours/edit", json={
        "gender": "male", "day": "funday", "field": "open", "value": "07:00",
    })
    assert invalid.status_code == 422

    assert client.delete(f"/api/gyms/{gym_id}").status_code == 200
    assert client.get(f"/api/gyms/{gym_id}").status_code == 404


def test_gym_image_is_served_without_session(client):
    gym_id = client.post("/api/gyms", json={"name": "Iron Temple"}).json()["gym"]["id"]

    uploaded = client.post(
        f"/api/gyms/{gym_id}/images/1",
        files={"file": ("front.png", b"\x89PNG-bytes", "image/png")},
    )
    assert uploaded.status_code == 200

    image = client.get(uploaded.json()["imageUrl"], headers={"X-Admin-Email": ""})
    assert image.status_code == 200
    assert image.content == b"\x89PNG-bytes"
    assert image.headers["content-type"] == "image/png"


def test_subscription_update(client, database):
    database.subscriptions.documents.append(
        {"_id": "premium", "SubscriptionID": "premium", "price": "3000", "SubscriptionDays": "30"}
    )

    response = client.patch("/api/subscriptions/premium", json={"price": 3500})
    negative = client.patch("/api/subscriptions/premium", json={"price": "-1"})

    assert response.status_code == 200
    assert response.json()["subscription"]["price"] == "3500"
    assert negative.status_code == 422


def test_payout_approval_records_admin(client, database):
    database.payout_requests.documents.append({"_id": "p1", "gymID": "g1", "status": "pending"})

    response = client.post("/api/payout-requests/p1/approve")
    again = client.post("/api/payout-requests/p1/reject")

    assert response.status_code == 200
    assert response.json()["request"]["approvedBy"] == "admin@gymvisa.com"
    assert again.status_code == 409
    assert client.get("/api/payout-requests/pending-count").json() == {"pendingCount": 0}


def test_scan_report_rejects_bad_dates(client):
    response = client.get("/api/scans", params={"start": "not-a-date"})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_scan_report_end_date_covers_whole_day(client, database):
    database.scans.documents.append(
        {"_id": "s1", "UserID": "u1", "gymName": "Pulse", "Time": "2024-01-15T21:30:00Z"}
    )

    response = client.get("/api/scans", params={"start": "2024-01-15", "end": "2024-01-15"})

    assert [scan["id"] for scan in response.json()["scans"]] == ["s1"]
