def _user_payload(email, role, password="secret123"):
    return {
        "email": email,
        "password": password,
        "confirmPassword": password,
        "firstName": "Marie",
        "lastName": "Curie",
        "role": role,
    }


def test_list_users_requires_authentication(client):
    response = client.get("/api/users")
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}


def test_admin_creates_user_and_action_is_logged(client, login):
    admin = login()

    response = client.post("/api/users", json=_user_payload("Prof@Ecole.com", "professor"))

    assert response.status_code == 201
    user = response.json()
    assert user["email"] == "prof@ecole.com"
    assert user["role"] == "professor"
    assert user["createdBy"] == admin["id"]
    assert "password" not in user

    entries = client.get("/api/activities").json()
    created = [e for e in entries if e["action"] == "create_user"]
    assert len(created) == 1
    assert created[0]["entityId"] == user["id"]
    assert "password" not in created[0]["details"]


def test_duplicate_email_is_rejected(client, login):
    login()
    assert client.post("/api/users", json=_user_payload("eleve@ecole.com", "student")).status_code == 201

    response = client.post("/api/users", json=_user_payload("eleve@ecole.com", "student"))

    assert response.status_code == 400
    assert response.json() == {"message": "User with this email already exists"}


def test_password_confirmation_must_match(client, login):
    login()
    payload = _user_payload("eleve@ecole.com", "student")
    payload["confirmPassword"] = "different"

    response = client.post("/api/users", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid data"
    assert body["errors"]


def test_professor_cannot_create_admin(client, login, make_user):
    make_user("prof@ecole.com", "professor")
    login("prof@ecole.com", "secret123")

    response = client.post("/api/users", json=_user_payload("boss@ecole.com", "admin"))

    assert response.status_code == 403
    assert client.post("/api/users", json=_user_payload("eleve@ecole.com", "student")).status_code == 201


def test_professor_cannot_promote_or_delete_staff(client, login, make_user):
    other_prof = make_user("autre.prof@ecole.com", "professor")
    student = make_user("eleve@ecole.com", "student")
    make_user("prof@ecole.com", "professor")
    login("prof@ecole.com", "secret123")

    assert client.put(f"/api/users/{student['id']}", json={"role": "admin"}).status_code == 403
    assert client.put(f"/api/users/{other_prof['id']}", json={"firstName": "X"}).status_code == 403
    assert client.delete(f"/api/users/{other_prof['id']}").status_code == 403
    assert client.put(f"/api/users/{student['id']}", json={"firstName": "Léa"}).json()["firstName"] == "Léa"


def test_students_and_parents_cannot_manage_users(client, login, make_user):
    make_user("eleve@ecole.com", "student")
    make_user("parent@ecole.com", "parent")

    for email in ("eleve@ecole.com", "parent@ecole.com"):
        login(email, "secret123")
        response = client.get("/api/users")
        assert response.status_code == 403
        assert response.json() == {"message": "Insufficient permissions"}


def test_update_user_email_conflict(client, login, make_user):
    make_user("a@ecole.com", "student")
    b = make_user("b@ecole.com", "student")

    response = client.put(f"/api/users/{b['id']}", json={"email": "a@ecole.com"})

    assert response.status_code == 400


def test_get_update_delete_unknown_user(client, login):
    login()
    missing = "00000000-0000-0000-0000-000000000000"

    assert client.get(f"/api/users/{missing}").json() == {"message": "User not found"}
    assert client.put(f"/api/users/{missing}", json={"firstName": "X"}).status_code == 404
    assert client.delete(f"/api/users/{missing}").status_code == 404


def test_invalid_uuid_in_path_is_a_validation_error(client, login):
    login()
    response = client.get("/api/users/not-a-uuid")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid data"


def test_delete_user(client, login, make_user):
    student = make_user("eleve@ecole.com", "student")

    response = client.delete(f"/api/users/{student['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert client.get(f"/api/users/{student['id']}").status_code == 404
    actions = [e["action"] for e in client.get("/api/activities").json()]
    assert actions.count("delete_user") == 1


def test_admin_password_reset_is_hashed_and_not_logged(client, login, make_user):
    student = make_user("eleve@ecole.com", "student")

    response = client.put(f"/api/users/{student['id']}", json={"password": "reset123"})
    assert response.status_code == 200

    update = next(e for e in client.get("/api/activities").json() if e["action"] == "update_user")
    assert "password" not in update["details"]["updates"]
    login("eleve@ecole.com", "reset123")
