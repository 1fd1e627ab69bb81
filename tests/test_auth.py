def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.json()["status"]


def test_login_returns_user_without_password(client):
    response = client.post("/api/auth/login", json={"email": "admin@ecole.com", "password": "admin23"})

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["email"] == "admin@ecole.com"
    assert user["role"] == "admin"
    assert user["mustChangePassword"] is False
    assert "password" not in user


def test_login_email_is_case_insensitive(client):
    response = client.post("/api/auth/login", json={"email": "Admin@Ecole.com", "password": "admin23"})
    assert response.status_code == 200


def test_failed_logins_look_identical(client, make_user):
    make_user("inactif@ecole.com", "student", isActive=False)
    client.post("/api/auth/logout")

    wrong_password = client.post("/api/auth/login", json={"email": "admin@ecole.com", "password": "nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "personne@ecole.com", "password": "admin23"})
    inactive = client.post("/api/auth/login", json={"email": "inactif@ecole.com", "password": "secret123"})

    for response in (wrong_password, unknown_email, inactive):
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}


def test_me_requires_a_session(client, login):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}

    login()
    response = client.get("/api/auth/me")
    assert response.status_code == 200
    assert response.json()["email"] == "admin@ecole.com"


def test_logout_ends_the_session_and_is_logged(client, login):
    admin = login()

    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    assert client.get("/api/auth/me").status_code == 401

    login()
    actions = [entry["action"] for entry in client.get(f"/api/activities?userId={admin['id']}").json()]
    assert "logout" in actions
    assert actions.count("login") == 2


def test_logout_without_session_succeeds(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 200


def test_change_password(client, login, make_user):
    make_user("eleve@ecole.com", "student")
    login("eleve@ecole.com", "secret123")

    wrong = client.post("/api/auth/change-password", json={
        "currentPassword": "wrong", "newPassword": "nouveau1", "confirmPassword": "nouveau1",
    })
    assert wrong.status_code == 400
    assert wrong.json() == {"message": "Current password is incorrect"}

    mismatch = client.post("/api/auth/change-password", json={
        "currentPassword": "secret123", "newPassword": "nouveau1", "confirmPassword": "nouveau2",
    })
    assert mismatch.status_code == 400
    assert mismatch.json()["message"] == "Invalid data"

    ok = client.post("/api/auth/change-password", json={
        "currentPassword": "secret123", "newPassword": "nouveau1", "confirmPassword": "nouveau1",
    })
    assert ok.status_code == 200
    assert client.get("/api/auth/me").json()["mustChangePassword"] is False

    client.post("/api/auth/logout")
    assert client.post("/api/auth/login", json={"email": "eleve@ecole.com", "password": "secret123"}).status_code == 401
    login("eleve@ecole.com", "nouveau1")


def test_deactivated_user_loses_their_session(client, second_client, login, make_user):
    student = make_user("eleve@ecole.com", "student")
    response = second_client.post("/api/auth/login", json={"email": "eleve@ecole.com", "password": "secret123"})
    assert response.status_code == 200
    assert second_client.get("/api/groups").status_code == 200

    client.put(f"/api/users/{student['id']}", json={"isActive": False})

    response = second_client.get("/api/groups")
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}


def test_me_rejects_a_deactivated_user_and_clears_the_session(client, second_client, make_user):
    student = make_user("eleve@ecole.com", "student")
    second_client.post("/api/auth/login", json={"email": "eleve@ecole.com", "password": "secret123"})
    assert second_client.get("/api/auth/me").status_code == 200

    client.put(f"/api/users/{student['id']}", json={"isActive": False})
    response = second_client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}

    # reactivating does not revive the cleared session
    client.put(f"/api/users/{student['id']}", json={"isActive": True})
    assert second_client.get("/api/auth/me").status_code == 401


def test_me_for_a_deleted_user_is_not_found(client, second_client, make_user):
    student = make_user("eleve@ecole.com", "student")
    second_client.post("/api/auth/login", json={"email": "eleve@ecole.com", "password": "secret123"})

    client.delete(f"/api/users/{student['id']}")

    response = second_client.get("/api/auth/me")
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}
