from datetime import datetime, timedelta, timezone

import pytest

from conftest import JWT_SECRET, auth_headers
from learnify.auth.permissions import Identity
from learnify.auth.security import hash_password, issue_token, validate_token, verify_password
from learnify.errors import AuthError, ConfigError
from learnify.models import Role


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestLogin:
    def test_login_returns_token_and_profile(self, client):
        res = client.post("/api/auth/login", json={"email": "alex@learnonline.edu", "password": "student123"})

        assert res.status_code == 200
        body = res.json()
        assert body["token"]
        assert _parse_timestamp(body["expiresAt"]) > datetime.now(timezone.utc)
        assert body["user"]["id"] == 1
        assert body["user"]["role"] == "student"
        assert "password_hash" not in body["user"]
        assert "passwordHash" not in body["user"]

    def test_email_is_trimmed_and_case_insensitive(self, client):
        res = client.post("/api/auth/login", json={"email": "  Meera@LearnOnline.EDU ", "password": "faculty123"})

        assert res.status_code == 200
        assert res.json()["user"]["role"] == "faculty"

    def test_token_from_login_opens_protected_routes(self, client):
        token = client.post(
            "/api/auth/login", json={"email": "admin@learnonline.edu", "password": "admin123"}
        ).json()["token"]

        res = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 200
        assert res.json()["name"] == "Admin User"

    def test_bad_password(self, client):
        res = client.post("/api/auth/login", json={"email": "alex@learnonline.edu", "password": "nope"})

        assert res.status_code == 401
        assert res.json() == {"error": "invalid credentials"}

    def test_unknown_email_looks_like_bad_password(self, client):
        res = client.post("/api/auth/login", json={"email": "ghost@learnonline.edu", "password": "student123"})

        assert res.status_code == 401
        assert res.json() == {"error": "invalid credentials"}

    def test_malformed_body(self, client):
        res = client.post("/api/auth/login", content="not json", headers={"Content-Type": "application/json"})

        assert res.status_code == 400
        assert res.json() == {"error": "invalid payload"}


class TestBearerToken:
    def test_missing_header(self, client):
        res = client.get("/api/me")

        assert res.status_code == 401
        assert res.json() == {"error": "missing bearer token"}

    def test_wrong_scheme(self, client):
        res = client.get("/api/me", headers={"Authorization": "Basic abc"})

        assert res.status_code == 401
        assert res.json() == {"error": "missing bearer token"}

    def test_garbage_token(self, client):
        res = client.get("/api/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert res.status_code == 401
        assert res.json() == {"error": "invalid token"}

    def test_token_signed_with_other_secret(self, client):
        token, _ = issue_token(1, "student", "some-other-secret")
        res = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

        assert res.status_code == 401
        assert res.json() == {"error": "invalid token"}

    def test_expired_token(self, client):
        token, _ = issue_token(1, "student", JWT_SECRET, ttl=timedelta(minutes=-5))
        res = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

        assert res.status_code == 401
        assert res.json() == {"error": "invalid token"}

    def test_me_for_deleted_user(self, client):
        res = client.get("/api/me", headers=auth_headers(999, "student"))

        assert res.status_code == 404
        assert res.json() == {"error": "user not found"}


class TestRoleGate:
    def test_student_is_forbidden_from_faculty_dashboard(self, client, student):
        res = client.get("/api/faculty/dashboard", headers=student)

        assert res.status_code == 403
        assert res.json() == {"error": "forbidden"}

    def test_admin_passes_faculty_gate(self, client, admin):
        assert client.get("/api/faculty/dashboard", headers=admin).status_code == 200

    def test_faculty_is_forbidden_from_student_dashboard(self, client, faculty):
        assert client.get("/api/student/dashboard", headers=faculty).status_code == 403

    def test_only_admin_reads_admin_overview(self, client, student, faculty, admin):
        assert client.get("/api/admin/overview", headers=student).status_code == 403
        assert client.get("/api/admin/overview", headers=faculty).status_code == 403
        assert client.get("/api/admin/overview", headers=admin).status_code == 200

    def test_role_comparison_ignores_case(self, client):
        res = client.get("/api/faculty/dashboard", headers=auth_headers(6, "FACULTY"))
        assert res.status_code == 200

    def test_preflight_skips_authentication(self, client):
        res = client.options(
            "/api/faculty/dashboard",
            headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
        )
        assert res.status_code == 200


class TestSecurityHelpers:
    def test_password_roundtrip(self):
        hashed = hash_password("s3cret")

        assert hashed != "s3cret"
        verify_password(hashed, "s3cret")
        with pytest.raises(AuthError):
            verify_password(hashed, "wrong")

    def test_empty_hash_never_matches(self):
        with pytest.raises(AuthError):
            verify_password("", "")

    def test_token_claims(self):
        token, expires_at = issue_token(42, "faculty", JWT_SECRET, ttl=timedelta(hours=1))

        assert validate_token(token, JWT_SECRET) == (42, "faculty")
        assert expires_at.tzinfo is not None

    def test_issue_without_secret(self):
        with pytest.raises(ConfigError):
            issue_token(1, "student", "")

    def test_identity_has_role(self):
        identity = Identity(3, "Faculty")

        assert identity.is_faculty
        assert identity.has_role()
        assert identity.has_role(Role.FACULTY, Role.ADMIN)
        assert identity.has_role("admin", "faculty")
        assert not identity.has_role(Role.STUDENT)
