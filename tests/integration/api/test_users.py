import re

import pytest

from tests.utils.json_compare import exclude_keys


def temporary_password_from(email: dict) -> str:
    return re.search(r"Temporary password: (\S+)", email["body"]).group(1)


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create_user_with_onboarding(self, client, seeded_users, auth_headers, email_service, test_data):
        response = await client.post(
            "/users",
            json=test_data.get_copy("create_user_request"),
            headers=auth_headers(seeded_users["super_admin"]),
        )

        assert response.status_code == 201
        body = response.json()
        assert exclude_keys(body, {"id", "created_at"}) == test_data.get("create_user_expected")

        [welcome] = email_service.sent_emails
        assert welcome["to"] == "new.hire@company.com"
        assert welcome["template"] == "welcome"

        login = await client.post(
            "/auth/login",
            json={"email": "new.hire@company.com", "password": temporary_password_from(welcome)},
        )
        assert login.status_code == 200

        profile = await client.get(
            f"/users/{body['id']}", headers={"Authorization": f"Bearer {login.json()['access_token']}"}
        )
        assert profile.status_code == 200
        assert profile.json()["password_change_required"] is True

    @pytest.mark.asyncio
    async def test_create_without_welcome_email(self, client, seeded_users, auth_headers, email_service):
        response = await client.post(
            "/users",
            json={"email": "quiet@company.com", "name": "Quiet", "send_welcome_email": False},
            headers=auth_headers(seeded_users["manager"]),
        )

        assert response.status_code == 201
        assert response.json()["onboarding_status"]["audit_events"] == ["user_created"]
        assert email_service.sent_emails == []

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, client, seeded_users, auth_headers):
        response = await client.post(
            "/users",
            json={"email": "USER@company.com", "name": "Copy"},
            headers=auth_headers(seeded_users["super_admin"]),
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_manager_cannot_create_manager(self, client, seeded_users, auth_headers):
        response = await client.post(
            "/users",
            json={"email": "peer@company.com", "name": "Peer", "role": "MANAGER"},
            headers=auth_headers(seeded_users["manager"]),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ROLE_ELEVATION_FORBIDDEN"

    @pytest.mark.asyncio
    async def test_regular_user_cannot_create(self, client, seeded_users, auth_headers):
        response = await client.post(
            "/users",
            json={"email": "x@company.com", "name": "X"},
            headers=auth_headers(seeded_users["user"]),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"

    @pytest.mark.asyncio
    async def test_invalid_input(self, client, seeded_users, auth_headers):
        headers = auth_headers(seeded_users["super_admin"])

        bad_email = await client.post("/users", json={"email": "nope", "name": "X"}, headers=headers)
        blank_name = await client.post("/users", json={"email": "ok@company.com", "name": "   "}, headers=headers)

        assert bad_email.status_code == 400
        assert bad_email.json()["error"]["code"] == "INVALID_EMAIL_FORMAT"
        assert blank_name.status_code == 400
        assert blank_name.json()["error"]["code"] == "INVALID_NAME"


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/users/anything")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        response = await client.get("/users/anything", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"


class TestGetUser:
    @pytest.mark.asyncio
    async def test_user_can_view_self(self, client, seeded_users, auth_headers):
        user = seeded_users["user"]

        response = await client.get(f"/users/{user.id}", headers=auth_headers(user))

        assert response.status_code == 200
        assert exclude_keys(response.json(), {"created_at", "updated_at"}) == {
            "id": user.id,
            "email": "user@company.com",
            "name": "Uma User",
            "role": "USER",
            "password_change_required": False,
        }

    @pytest.mark.asyncio
    async def test_user_cannot_view_others(self, client, seeded_users, auth_headers):
        response = await client.get(
            f"/users/{seeded_users['manager'].id}", headers=auth_headers(seeded_users["user"])
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_manager_cannot_view_super_admin(self, client, seeded_users, auth_headers):
        response = await client.get(
            f"/users/{seeded_users['super_admin'].id}", headers=auth_headers(seeded_users["manager"])
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_user_is_localized(self, client, seeded_users, auth_headers):
        headers = {**auth_headers(seeded_users["super_admin"]), "Accept-Language": "fr-FR,fr;q=0.9"}

        response = await client.get("/users/does-not-exist", headers=headers)

        assert response.status_code == 404
        assert response.json()["error"] == {"code": "USER_NOT_FOUND", "message": "Utilisateur introuvable"}


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_super_admin_updates_user(self, client, seeded_users, auth_headers):
        user = seeded_users["user"]

        response = await client.patch(
            f"/users/{user.id}",
            json={"name": "  Uma Renamed ", "email": "Uma@Company.com"},
            headers=auth_headers(seeded_users["super_admin"]),
        )

        assert response.status_code == 200
        assert exclude_keys(response.json(), {"updated_at"}) == {
            "id": user.id,
            "email": "uma@company.com",
            "name": "Uma Renamed",
            "role": "USER",
        }

    @pytest.mark.asyncio
    async def test_update_replaces_cached_profile(self, client, seeded_users, auth_headers, cache_service):
        user = seeded_users["user"]
        headers = auth_headers(seeded_users["super_admin"])

        before = await client.get(f"/users/{user.id}", headers=headers)
        assert (await cache_service.get_user(user.id))["name"] == before.json()["name"]

        await client.patch(f"/users/{user.id}", json={"name": "Cache Buster"}, headers=headers)
        after = await client.get(f"/users/{user.id}", headers=headers)

        assert after.json()["name"] == "Cache Buster"
        assert (await cache_service.get_user(user.id))["name"] == "Cache Buster"

    @pytest.mark.asyncio
    async def test_user_can_rename_self_but_not_change_role(self, client, seeded_users, auth_headers):
        user = seeded_users["user"]

        renamed = await client.patch(f"/users/{user.id}", json={"name": "Me"}, headers=auth_headers(user))
        promoted = await client.patch(f"/users/{user.id}", json={"role": "MANAGER"}, headers=auth_headers(user))

        assert renamed.status_code == 200
        assert promoted.status_code == 403

    @pytest.mark.asyncio
    async def test_manager_cannot_promote(self, client, seeded_users, auth_headers):
        response = await client.patch(
            f"/users/{seeded_users['user'].id}",
            json={"role": "MANAGER"},
            headers=auth_headers(seeded_users["manager"]),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ROLE_ELEVATION_FORBIDDEN"

    @pytest.mark.asyncio
    async def test_email_taken(self, client, seeded_users, auth_headers):
        response = await client.patch(
            f"/users/{seeded_users['user'].id}",
            json={"email": "manager@company.com"},
            headers=auth_headers(seeded_users["super_admin"]),
        )

        assert response.status_code == 409


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_super_admin_deletes_user(self, client, seeded_users, auth_headers):
        headers = auth_headers(seeded_users["super_admin"])
        user_id = seeded_users["user"].id
        assert (await client.get(f"/users/{user_id}", headers=headers)).status_code == 200

        response = await client.delete(f"/users/{user_id}", headers=headers)

        assert response.status_code == 200
        assert exclude_keys(response.json(), {"deleted_at"}) == {"success": True, "deleted_user_id": user_id}
        assert (await client.get(f"/users/{user_id}", headers=headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_deleted_user_sessions_are_gone(self, client, seeded_users, auth_headers, test_data):
        login = await client.post(
            "/auth/login", json={"email": "user@company.com", "password": test_data.get("password")}
        )
        await client.delete(f"/users/{seeded_users['user'].id}", headers=auth_headers(seeded_users["super_admin"]))

        response = await client.post("/auth/refresh", json={"refresh_token": login.json()["refresh_token"]})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_self_deletion_forbidden(self, client, seeded_users, auth_headers):
        admin = seeded_users["super_admin"]

        response = await client.delete(f"/users/{admin.id}", headers=auth_headers(admin))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "SELF_DELETION_FORBIDDEN"

    @pytest.mark.asyncio
    async def test_manager_cannot_delete_manager_or_admin(self, client, seeded_users, auth_headers):
        response = await client.delete(
            f"/users/{seeded_users['super_admin'].id}", headers=auth_headers(seeded_users["manager"])
        )

        assert response.status_code == 403


class TestSearchUsers:
    @pytest.mark.asyncio
    async def test_lists_all_users(self, client, seeded_users, auth_headers):
        response = await client.get("/users/search", headers=auth_headers(seeded_users["super_admin"]))

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 3
        assert body["meta"] == {
            "page": 1,
            "limit": 20,
            "total": 3,
            "total_pages": 1,
            "has_next": False,
            "has_previous": False,
        }

    @pytest.mark.asyncio
    async def test_filters_and_sorts(self, client, seeded_users, auth_headers):
        response = await client.get(
            "/users/search",
            params={"roles": ["USER", "MANAGER"], "sort_by": "name", "sort_order": "ASC"},
            headers=auth_headers(seeded_users["super_admin"]),
        )

        assert response.status_code == 200
        assert [user["name"] for user in response.json()["data"]] == ["Max Manager", "Uma User"]

    @pytest.mark.asyncio
    async def test_search_term_matches_email_or_name(self, client, seeded_users, auth_headers):
        response = await client.get(
            "/users/search",
            params={"search_term": "  ada ", "limit": 1000},
            headers=auth_headers(seeded_users["super_admin"]),
        )

        body = response.json()
        assert [user["email"] for user in body["data"]] == ["admin@company.com"]
        assert body["meta"]["limit"] == 100

    @pytest.mark.asyncio
    async def test_only_super_admin_can_search(self, client, seeded_users, auth_headers):
        response = await client.get("/users/search", headers=auth_headers(seeded_users["manager"]))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_invalid_sort_field(self, client, seeded_users, auth_headers):
        response = await client.get(
            "/users/search", params={"sort_by": "password"}, headers=auth_headers(seeded_users["super_admin"])
        )

        assert response.status_code == 400
