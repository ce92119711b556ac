"""
Roster Backend — API Endpoint Tests
====================================

What:  Full request flows through routing, dependencies, services and an
       in-memory SQLite database.

What we test:
    ✅ Register → login → /me
    ✅ 401 without / with a bad token, 403 for User on Admin routes
    ✅ Employee CRUD and search
    ✅ Report generate / list / get / download / delete, statistics
    ✅ Admin-issued password reset
    ✅ Password tools, health, request IDs, auth rate limit
"""

import pytest

from roster.config import settings

USER_PASSWORD = "Str0ng!Passw0rd"


class TestAuthFlow:

    @pytest.mark.asyncio
    async def test_register_login_me(self, test_client, user_headers):
        response = await test_client.get("/api/auth/me", headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "alice"
        assert body["role"] == "User"
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_duplicate_username(self, test_client, user_headers):
        response = await test_client.post(
            "/api/auth/register", json={"username": "alice", "password": USER_PASSWORD}
        )
        assert response.status_code == 409
        assert response.json()["message"] == "User already exists"

    @pytest.mark.asyncio
    async def test_weak_password_rejected(self, test_client):
        response = await test_client.post(
            "/api/auth/register", json={"username": "bob", "password": "abc"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["recommendations"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, user_headers):
        response = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "wrong"}
        )
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["message"] == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_missing_and_bad_token(self, test_client):
        missing = await test_client.get("/api/auth/me")
        assert missing.status_code == 401

        bad = await test_client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not.a.token"}
        )
        assert bad.status_code == 401

    @pytest.mark.asyncio
    async def test_admin_login_returns_role(self, test_client, admin_headers):
        response = await test_client.get("/api/auth/me", headers=admin_headers)
        assert response.json()["role"] == "Admin"


class TestPasswordTools:

    @pytest.mark.asyncio
    async def test_password_strength(self, test_client):
        response = await test_client.post(
            "/api/auth/password-strength", json={"password": "Ab3!Ab3!Ab3!"}
        )
        assert response.status_code == 200
        assert response.json() == {
            "score": 6,
            "max_score": 6,
            "level": "excellent",
            "recommendations": [],
        }

    @pytest.mark.asyncio
    async def test_password_strength_empty(self, test_client):
        response = await test_client.post("/api/auth/password-strength", json={})
        body = response.json()
        assert body["score"] == 0
        assert body["level"] == "very weak"
        assert body["recommendations"]

    @pytest.mark.asyncio
    async def test_generate_password(self, test_client, user_headers):
        response = await test_client.get(
            "/api/auth/generate-password",
            params={"length": 16, "include_special": "false"},
            headers=user_headers,
        )
        assert response.status_code == 200
        password = response.json()["password"]
        assert len(password) == 16
        assert password.isalnum()

    @pytest.mark.asyncio
    async def test_generate_password_too_short(self, test_client, user_headers):
        response = await test_client.get(
            "/api/auth/generate-password", params={"length": 3}, headers=user_headers
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "length"


class TestPasswordReset:

    @pytest.mark.asyncio
    async def test_reset_flow(self, test_client, admin_headers, user_headers):
        issued = await test_client.post(
            "/api/auth/users/alice/reset-token", headers=admin_headers
        )
        assert issued.status_code == 200
        token = issued.json()["reset_token"]

        reset = await test_client.post(
            "/api/auth/password-reset",
            json={"username": "alice", "token": token, "new_password": "N3w!Passw0rd#"},
        )
        assert reset.status_code == 204

        old = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": USER_PASSWORD}
        )
        assert old.status_code == 401
        new = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "N3w!Passw0rd#"}
        )
        assert new.status_code == 200

        # single use
        replay = await test_client.post(
            "/api/auth/password-reset",
            json={"username": "alice", "token": token, "new_password": "An0ther!Passw0rd"},
        )
        assert replay.status_code == 401

    @pytest.mark.asyncio
    async def test_only_admin_issues_tokens(self, test_client, user_headers):
        response = await test_client.post(
            "/api/auth/users/alice/reset-token", headers=user_headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_client, admin_headers):
        response = await test_client.post(
            "/api/auth/users/ghost/reset-token", headers=admin_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_token(self, test_client, user_headers):
        response = await test_client.post(
            "/api/auth/password-reset",
            json={"username": "alice", "token": "guess", "new_password": "N3w!Passw0rd#"},
        )
        assert response.status_code == 401


class TestEmployees:

    @pytest.mark.asyncio
    async def test_crud(self, test_client, admin_headers, employee_payload):
        created = await test_client.post(
            "/api/employees", json=employee_payload, headers=admin_headers
        )
        assert created.status_code == 201
        employee = created.json()
        assert employee["full_name"] == "Ana Horvat"
        assert created.headers["Location"] == f"/api/employees/{employee['id']}"

        fetched = await test_client.get(created.headers["Location"], headers=admin_headers)
        assert fetched.status_code == 200
        assert fetched.json()["email"] == "ana.horvat@example.com"

        updated = await test_client.put(
            created.headers["Location"],
            json={**employee_payload, "position": "Team Lead"},
            headers=admin_headers,
        )
        assert updated.status_code == 204
        fetched = await test_client.get(created.headers["Location"], headers=admin_headers)
        assert fetched.json()["position"] == "Team Lead"

        deleted = await test_client.delete(created.headers["Location"], headers=admin_headers)
        assert deleted.status_code == 204
        missing = await test_client.get(created.headers["Location"], headers=admin_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_search(self, test_client, admin_headers, employee_payload):
        await test_client.post("/api/employees", json=employee_payload, headers=admin_headers)
        await test_client.post(
            "/api/employees",
            json={
                "first_name": "Maja",
                "last_name": "Novak",
                "position": "Accountant",
                "department": "Finance",
                "email": "maja@example.com",
            },
            headers=admin_headers,
        )

        everyone = await test_client.get("/api/employees", headers=admin_headers)
        assert everyone.headers["X-Total-Count"] == "2"
        assert [e["last_name"] for e in everyone.json()] == ["Horvat", "Novak"]

        finance = await test_client.get(
            "/api/employees", params={"q": "FINANCE"}, headers=admin_headers
        )
        assert [e["first_name"] for e in finance.json()] == ["Maja"]

    @pytest.mark.asyncio
    async def test_user_can_read_but_not_write(
        self, test_client, admin_headers, user_headers, employee_payload
    ):
        listed = await test_client.get("/api/employees", headers=user_headers)
        assert listed.status_code == 200

        created = await test_client.post(
            "/api/employees", json=employee_payload, headers=user_headers
        )
        assert created.status_code == 403
        assert created.json()["details"]["required_role"] == "Admin"

    @pytest.mark.asyncio
    async def test_invalid_email(self, test_client, admin_headers, employee_payload):
        response = await test_client.post(
            "/api/employees",
            json={**employee_payload, "email": "not-an-email"},
            headers=admin_headers,
        )
        assert response.status_code == 422


class TestReports:

    async def _seed(self, client, headers):
        for first, last, position, department in [
            ("Ana", "Horvat", "Developer", "IT"),
            ("Ivo", "Kovač", "Developer", "IT"),
            ("Maja", "Novak", "Accountant", "Finance"),
        ]:
            response = await client.post(
                "/api/employees",
                json={
                    "first_name": first,
                    "last_name": last,
                    "position": position,
                    "department": department,
                    "email": f"{first.lower()}@example.com",
                },
                headers=headers,
            )
            assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_statistics(self, test_client, admin_headers):
        await self._seed(test_client, admin_headers)

        response = await test_client.get("/api/reports/statistics", headers=admin_headers)

        assert response.status_code == 200
        stats = response.json()
        assert stats["total_employees"] == 3
        assert stats["department_breakdown"] == {"IT": 2, "Finance": 1}
        assert stats["position_breakdown"] == {"Developer": 2, "Accountant": 1}
        assert stats["largest_department"] == "IT"
        assert stats["most_popular_position"] == "Developer"
        assert stats["average_employees_per_department"] == 1.5

    @pytest.mark.asyncio
    async def test_report_lifecycle(self, test_client, admin_headers, user_headers):
        await self._seed(test_client, admin_headers)

        created = await test_client.post(
            "/api/reports",
            json={"title": "Roster", "type": "export"},
            headers=user_headers,
        )
        assert created.status_code == 201
        report = created.json()
        assert report["created_by"] == "alice"
        assert "Exported 3 employee records." in report["content"]

        listed = await test_client.get("/api/reports", headers=user_headers)
        assert [r["id"] for r in listed.json()] == [report["id"]]

        fetched = await test_client.get(f"/api/reports/{report['id']}", headers=user_headers)
        assert fetched.json()["content"] == report["content"]

        download = await test_client.get(report["download_url"], headers=user_headers)
        assert download.status_code == 200
        assert download.headers["content-type"].startswith("text/plain")
        assert "attachment" in download.headers["content-disposition"]
        assert download.text == report["content"]

        deleted = await test_client.delete(f"/api/reports/{report['id']}", headers=user_headers)
        assert deleted.status_code == 204
        gone = await test_client.get(f"/api/reports/{report['id']}", headers=user_headers)
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_type(self, test_client, user_headers):
        response = await test_client.post(
            "/api/reports", json={"title": "Pay", "type": "payroll"}, headers=user_headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_id(self, test_client, user_headers):
        response = await test_client.get("/api/reports/not-a-uuid", headers=user_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid report ID"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, test_client):
        response = await test_client.get("/api/reports")
        assert response.status_code == 401


class TestInfrastructure:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"

        generated = await test_client.get("/health")
        assert len(generated.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_login_rate_limited(self, test_client):
        statuses = []
        for _ in range(settings.auth_rate_limit_requests + 1):
            response = await test_client.post(
                "/api/auth/login", json={"username": "nobody", "password": "x"}
            )
            statuses.append(response.status_code)

        assert statuses[:-1] == [401] * settings.auth_rate_limit_requests
        assert statuses[-1] == 429
        assert int(response.headers["Retry-After"]) > 0
