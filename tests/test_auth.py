from conftest import PASSWORD, make_user


def test_login_sets_session_cookie_and_returns_user(client, users):
    response = client.post("/api/auth/login",
                           json={"email": users["ORG_ADMIN"].email, "password": PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == users["ORG_ADMIN"].email
    assert body["user"]["roles"] == ["ORG_ADMIN"]
    assert body["accessToken"]
    assert "bms_session" in response.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == str(users["ORG_ADMIN"].id)
    assert me.json()["lastLoginAt"] is not None


def test_login_accepts_mixed_case_email(client, users):
    response = client.post("/api/auth/login",
                           json={"email": users["ACCOUNTANT"].email.upper(), "password": PASSWORD})
    assert response.status_code == 200


def test_login_with_wrong_password(client, users):
    response = client.post("/api/auth/login",
                           json={"email": users["ORG_ADMIN"].email, "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}


def test_login_refused_for_inactive_user(client, db, org):
    make_user(db, "gone@addisproperties.com", ["ACCOUNTANT"], org.id, status="inactive")
    response = client.post("/api/auth/login",
                           json={"email": "gone@addisproperties.com", "password": PASSWORD})
    assert response.status_code == 403
    assert response.json()["error"].startswith("Access denied")


def test_requests_without_session_are_rejected(client):
    response = client.get("/api/buildings")
    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required"}


def test_bearer_token_fallback_and_logout(client, users):
    login = client.post("/api/auth/login",
                        json={"email": users["AUDITOR"].email, "password": PASSWORD})
    token = login.json()["accessToken"]
    client.cookies.clear()
    headers = {"Authorization": f"Bearer {token}"}

    assert client.get("/api/auth/me", headers=headers).status_code == 200

    logout = client.post("/api/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.json() == {"message": "Logged out"}

    after = client.get("/api/auth/me", headers=headers)
    assert after.status_code == 401
    assert after.json()["error"] == "Session has been logged out or is inactive"


def test_garbage_token_is_rejected(client, users):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_deactivated_user_loses_access(login, db, users):
    client = login("TECHNICIAN")
    users["TECHNICIAN"].status = "suspended"
    db.commit()

    response = client.get("/api/auth/me")
    assert response.status_code == 403
