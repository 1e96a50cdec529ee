import pytest
from fastapi.testclient import TestClient

from profile_api.config import Settings
from profile_api.db.models.users.user import DEFAULT_PHOTO_URL, DEFAULT_ABOUT
from profile_api.main import create_app

ANA = {"firstName": "Ana", "email": "ana@x.com", "username": "ana_01", "password": "secret123"}


@pytest.fixture
def client():
    app = create_app(Settings(DATABASE_URL="sqlite://"))
    with TestClient(app) as c:
        yield c


def _lookup(client, email):
    return client.request("GET", "/user", json={"email": email})


def _signup_ana(client):
    res = client.post("/signup", json=ANA)
    assert res.status_code == 200
    return _lookup(client, "ana@x.com").json()[0]


def test_signup_creates_one_record_with_defaults(client):
    res = client.post("/signup", json=ANA)
    assert res.status_code == 200
    assert res.text == "User added Successfully."
    assert res.headers["content-type"].startswith("text/plain")

    records = _lookup(client, "ana@x.com").json()
    assert len(records) == 1
    user = records[0]
    assert user["_id"]
    assert user["firstName"] == "Ana"
    assert user["photoUrl"] == DEFAULT_PHOTO_URL
    assert user["about"] == DEFAULT_ABOUT
    assert user["skills"] == []
    assert "createdAt" in user and "updatedAt" in user
    assert "password" not in user


def test_repeat_signup_conflicts(client):
    client.post("/signup", json=ANA)
    res = client.post("/signup", json=ANA)
    assert res.status_code == 400
    assert res.text == "Error adding user. User already exists. Please try a different email or username."
    assert len(_lookup(client, "ana@x.com").json()) == 1


def test_signup_invalid_email_creates_nothing(client):
    res = client.post("/signup", json={**ANA, "email": "ana-at-x.com"})
    assert res.status_code == 400
    assert res.text == "Error adding user. Invalid Email."
    assert _lookup(client, "ana-at-x.com").status_code == 404


def test_signup_invalid_username(client):
    res = client.post("/signup", json={**ANA, "username": "a..b"})
    assert res.status_code == 400
    assert res.text == "Error adding user. Invalid username."


def test_signup_malformed_json_is_400(client):
    res = client.post("/signup", content="{not json", headers={"content-type": "application/json"})
    assert res.status_code == 400


def test_feed_acknowledges_without_returning_records(client):
    client.post("/signup", json=ANA)
    res = client.get("/feed")
    assert res.status_code == 200
    # The records are logged server-side only
    assert res.text == "Got feed data."


def test_lookup_unknown_email_is_404(client):
    res = _lookup(client, "nobody@x.com")
    assert res.status_code == 404
    assert res.text == "There is no username with such email."


def test_lookup_without_email_is_400(client):
    res = client.request("GET", "/user", json={})
    assert res.status_code == 400
    assert res.text == "Something went wrong getting user by email."


def test_delete_user(client):
    user = _signup_ana(client)
    res = client.request("DELETE", "/user", json={"_id": user["_id"]})
    assert res.status_code == 200
    assert res.text == "Deleted user"
    assert _lookup(client, "ana@x.com").status_code == 404

    # Deleting again is indistinguishable from the first delete
    res = client.request("DELETE", "/user", json={"_id": user["_id"]})
    assert res.status_code == 200


def test_delete_without_id_is_400(client):
    res = client.request("DELETE", "/user", json={})
    assert res.status_code == 400
    assert res.text == "Something went wrong deleting user..."


def test_update_user(client):
    user = _signup_ana(client)
    res = client.patch(f"/user/{user['_id']}", json={"age": 30, "skills": ["python", "sql"], "phone": "+1 555-123-4567"})
    assert res.status_code == 200
    assert res.text == "Updated user."

    updated = _lookup(client, "ana@x.com").json()[0]
    assert updated["age"] == 30
    assert updated["skills"] == ["python", "sql"]
    assert updated["phone"] == "+1 555-123-4567"
    assert updated["createdAt"] == user["createdAt"]


def test_update_short_phone_is_400(client):
    user = _signup_ana(client)
    res = client.patch(f"/user/{user['_id']}", json={"phone": "12"})
    assert res.status_code == 400
    assert res.text == "Something went wrong updating user...Invalid phone number."


@pytest.mark.parametrize("age, status", [(7, 400), (8, 200), (100, 200), (101, 400)])
def test_update_age_bounds(client, age, status):
    user = _signup_ana(client)
    assert client.patch(f"/user/{user['_id']}", json={"age": age}).status_code == status


def test_update_skills_limit(client):
    user = _signup_ana(client)
    assert client.patch(f"/user/{user['_id']}", json={"skills": list("abcde")}).status_code == 200
    assert client.patch(f"/user/{user['_id']}", json={"skills": list("abcdef")}).status_code == 400


def test_update_outside_allow_list_applies_nothing(client):
    user = _signup_ana(client)
    res = client.patch(f"/user/{user['_id']}", json={"age": 30, "username": "someone"})
    assert res.status_code == 400
    assert res.text == "Something went wrong updating user...Can only update certain fields."
    unchanged = _lookup(client, "ana@x.com").json()[0]
    assert unchanged["age"] is None
    assert unchanged["username"] == "ana_01"


def test_update_unknown_user(client):
    res = client.patch("/user/does-not-exist", json={"age": 30})
    assert res.status_code == 400
    assert res.text == "Something went wrong updating user...Cannot update User."


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["database"]["ok"] is True


def test_unreachable_database_prevents_startup(tmp_path):
    app = create_app(Settings(DATABASE_URL=f"sqlite:///{tmp_path}/missing/dir/profile.db"))
    with pytest.raises(Exception):
        with TestClient(app):
            pass


def test_timestamps_round_trip_and_update_advances(client):
    user = _signup_ana(client)
    assert user["createdAt"].endswith(("Z", "+00:00"))
    assert user["updatedAt"].endswith(("Z", "+00:00"))
    assert _lookup(client, "ana@x.com").json()[0]["createdAt"] == user["createdAt"]

    res = client.patch(f"/user/{user['_id']}", json={"about": "Backend developer"})
    assert res.status_code == 200
    updated = _lookup(client, "ana@x.com").json()[0]
    assert updated["createdAt"] == user["createdAt"]
    assert updated["updatedAt"] > user["updatedAt"]


def test_update_rejects_malformed_photo_host(client):
    user = _signup_ana(client)
    res = client.patch(f"/user/{user['_id']}", json={"photoUrl": "https://-bad-.com"})
    assert res.status_code == 400
    assert res.text == "Something went wrong updating user...Invalid Photo Url."
    assert _lookup(client, "ana@x.com").json()[0]["photoUrl"] != "https://-bad-.com"


def test_signup_snake_case_keys_are_not_aliases(client):
    res = client.post("/signup", json={"first_name": "Ana", "email": "ana@x.com", "username": "ana_01", "password": "secret123"})
    assert res.status_code == 400
    assert res.text == "Error adding user. firstName is required."
