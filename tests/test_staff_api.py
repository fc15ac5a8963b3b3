"""
Staff back office: table listing, creation, update, soft delete, password
reset and the permission checks guarding each of them.
"""
import pytest
from sqlalchemy.orm import selectinload

from lms_admin.model import User
from lms_admin.repositories.role_repo import RoleRepository
from lms_admin.utils.security import verify_password

HTML = {"Accept": "text/html,application/xhtml+xml"}


@pytest.fixture
async def alice(seed, editor_role, staff_role) -> User:
    return await seed.user("Alice Martin", "alice@example.com", roles=[editor_role, staff_role])


@pytest.fixture
async def bob(seed, support_role, staff_role) -> User:
    return await seed.user("Bob Stone", "bob.stone@example.com", roles=[support_role, staff_role])


@pytest.fixture
async def retired(seed, editor_role, staff_role) -> User:
    return await seed.user("Rita Retired", "rita@example.com", roles=[editor_role, staff_role], deleted=True)


@pytest.fixture
async def learner(seed) -> User:
    return await seed.user("Liam Learner", "liam@example.com")


@pytest.fixture
async def limited_user(seed, staff_permissions) -> User:
    """Holds only the staff-list permission"""
    role = await seed.role("Viewer", permissions=[staff_permissions["staff-list"]])
    return await seed.user("Vera Viewer", "vera@example.com", roles=[role])


async def load_user(fetch, user_id: int) -> User:
    return await fetch(User, user_id, selectinload(User.roles))


class TestStaffTable:
    async def test_lists_only_live_custom_role_users(
            self, client, auth, admin, alice, bob, retired, learner, editor_role
    ):
        response = await client.get("/staffs/show", headers=auth(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [row["email"] for row in body["rows"]] == [bob.email, alice.email]

        alice_row = body["rows"][1]
        assert alice_row["status"] is True
        assert alice_row["role_id"] == editor_role.id
        assert "password" not in alice_row
        assert f"/staffs/{alice.id}/change-password" in alice_row["operate"]
        assert f"/staffs/{alice.id}" in alice_row["operate"]
        assert "delete-form" in alice_row["operate"]

    async def test_show_deleted_lists_only_trashed(self, client, auth, admin, alice, retired):
        response = await client.get("/staffs/show", params={"show_deleted": "1"}, headers=auth(admin))

        body = response.json()
        assert body["total"] == 1
        assert body["rows"][0]["id"] == retired.id
        assert body["rows"][0]["status"] is False

    async def test_show_deleted_other_values_list_live_rows(self, client, auth, admin, alice, retired):
        response = await client.get("/staffs/show", params={"show_deleted": "0"}, headers=auth(admin))

        assert [row["id"] for row in response.json()["rows"]] == [alice.id]

    @pytest.mark.parametrize("term", ["ALICE", "martin", "alice@EXAMPLE"])
    async def test_search_is_case_insensitive_on_name_or_email(self, client, auth, admin, alice, bob, term):
        response = await client.get("/staffs/show", params={"search": term}, headers=auth(admin))

        body = response.json()
        assert body["total"] == 1
        assert body["rows"][0]["id"] == alice.id

    async def test_pagination_and_sorting(self, client, auth, admin, alice, bob):
        response = await client.get(
            "/staffs/show",
            params={"sort": "name", "order": "asc", "offset": 1, "limit": 1},
            headers=auth(admin),
        )

        body = response.json()
        assert body["total"] == 2
        assert [row["name"] for row in body["rows"]] == ["Bob Stone"]

    async def test_requires_staff_list_permission(self, client, auth, learner):
        response = await client.get("/staffs/show", headers=auth(learner))

        assert response.status_code == 403
        assert response.json()["status"] == "error"


class TestStaffViews:
    async def test_index_renders_custom_roles(self, client, auth, admin, editor_role, support_role, staff_role):
        response = await client.get("/staffs", headers=auth(admin, **HTML))

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Editor" in response.text
        assert "Support" in response.text
        assert 'value="%d"' % staff_role.id not in response.text

    async def test_index_accepts_any_staff_permission(self, client, auth, limited_user):
        response = await client.get("/staffs", headers=auth(limited_user, **HTML))

        assert response.status_code == 200

    async def test_create_view_needs_create_permission(self, client, auth, limited_user):
        response = await client.get("/staffs/create", headers=auth(limited_user, **HTML))

        assert response.status_code == 303
        assert response.headers["location"] == "/"

    async def test_create_view_renders_form(self, client, auth, admin, editor_role):
        response = await client.get("/staffs/create", headers=auth(admin, **HTML))

        assert response.status_code == 200
        assert "Editor" in response.text

    async def test_index_without_permission_redirects_home(self, client, auth, learner):
        response = await client.get("/staffs", headers=auth(learner, **HTML))

        assert response.status_code == 303
        assert response.headers["location"] == "/"


class TestStaffStore:
    async def test_creates_staff_with_requested_and_system_role(
            self, client, auth, admin, editor_role, staff_role, fetch, session_factory
    ):
        response = await client.post(
            "/staffs",
            json={"name": "John Doe", "email": "john.doe@example.com", "role": editor_role.id, "is_active": True},
            headers=auth(admin),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Staff Created Successfully"
        assert body["data"]["redirect_url"].endswith("/staffs")

        async with session_factory() as session:
            user = (await session.execute(
                User.__table__.select().where(User.email == "john.doe@example.com")
            )).one()
        created = await load_user(fetch, user.id)
        assert created.slug == "john-doe"
        assert created.is_active is True
        assert verify_password("john.doe", created.password)
        assert sorted(role.name for role in created.roles) == ["Editor", "Staff"]

    async def test_is_active_defaults_to_false(self, client, auth, admin, editor_role, staff_role, count_rows):
        response = await client.post(
            "/staffs",
            json={"name": "Jane", "email": "jane@example.com", "role": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 200
        assert await count_rows(User, User.email == "jane@example.com", User.is_active.is_(False)) == 1

    @pytest.mark.parametrize("flag, expected", [(False, False), ("0", False), ("1", True)])
    async def test_is_active_follows_the_sent_value(
            self, client, auth, admin, editor_role, staff_role, count_rows, flag, expected
    ):
        response = await client.post(
            "/staffs",
            json={"name": "Jane", "email": "jane@example.com", "role": editor_role.id, "is_active": flag},
            headers=auth(admin),
        )

        assert response.status_code == 200
        assert await count_rows(User, User.email == "jane@example.com", User.is_active.is_(expected)) == 1

    async def test_staff_role_is_created_when_missing(self, client, auth, admin, editor_role, count_rows):
        response = await client.post(
            "/staffs",
            json={"name": "Jane", "email": "jane@example.com", "role": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 200
        assert await count_rows(User, User.roles.any(name="Staff")) == 1

    async def test_duplicate_names_get_distinct_slugs(
            self, client, auth, admin, editor_role, staff_role, session_factory
    ):
        for email in ("john1@example.com", "john2@example.com"):
            response = await client.post(
                "/staffs",
                json={"name": "John Doe", "email": email, "role": editor_role.id},
                headers=auth(admin),
            )
            assert response.status_code == 200

        async with session_factory() as session:
            rows = (await session.execute(
                User.__table__.select().where(User.name == "John Doe").order_by(User.id)
            )).all()
        assert [row.slug for row in rows] == ["john-doe", "john-doe-1"]

    async def test_duplicate_email_is_422_and_creates_nothing(
            self, client, auth, admin, alice, editor_role, count_rows
    ):
        before = await count_rows(User)

        response = await client.post(
            "/staffs",
            json={"name": "Alice Again", "email": alice.email, "role": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 422
        assert response.json()["message"] == "The email has already been taken."
        assert response.json()["errors"] == {"email": ["The email has already been taken."]}
        assert await count_rows(User) == before

    async def test_email_of_soft_deleted_user_is_still_taken(
            self, client, auth, admin, retired, editor_role
    ):
        response = await client.post(
            "/staffs",
            json={"name": "Rita", "email": retired.email, "role": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 422

    async def test_system_role_cannot_be_assigned(self, client, auth, admin, staff_role, count_rows):
        before = await count_rows(User)

        response = await client.post(
            "/staffs",
            json={"name": "Sneaky", "email": "sneaky@example.com", "role": staff_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 422
        assert "role" in response.json()["errors"]
        assert await count_rows(User) == before

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "x@example.com", "role": 1},
            {"name": "No email", "role": 1},
            {"name": "Bad email", "email": "not-an-email", "role": 1},
            {"name": "No role", "email": "x@example.com"},
        ],
    )
    async def test_invalid_payload_is_422(self, client, auth, admin, payload):
        response = await client.post("/staffs", json=payload, headers=auth(admin))

        assert response.status_code == 422

    async def test_failure_rolls_back_everything(
            self, client, auth, admin, editor_role, staff_role, count_rows, monkeypatch
    ):
        async def broken_sync_roles(self, user, roles, commit=True):
            raise RuntimeError("role table locked")

        monkeypatch.setattr(RoleRepository, "sync_roles", broken_sync_roles)
        before = await count_rows(User)

        response = await client.post(
            "/staffs",
            json={"name": "Unlucky", "email": "unlucky@example.com", "role": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Something Went Wrong"
        assert await count_rows(User) == before

    async def test_requires_create_permission(self, client, auth, limited_user, editor_role, count_rows):
        before = await count_rows(User)

        response = await client.post(
            "/staffs",
            json={"name": "Nope", "email": "nope@example.com", "role": editor_role.id},
            headers=auth(limited_user),
        )

        assert response.status_code == 403
        assert await count_rows(User) == before


class TestStaffUpdate:
    async def test_role_change_swaps_only_custom_role(
            self, client, auth, admin, alice, support_role, fetch
    ):
        response = await client.put(
            f"/staffs/{alice.id}",
            json={"name": "Alice M.", "email": alice.email, "role_id": support_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "User Update Successfully"
        updated = await load_user(fetch, alice.id)
        assert updated.name == "Alice M."
        assert sorted(role.name for role in updated.roles) == ["Staff", "Support"]

    async def test_unchanged_email_keeps_password(self, client, auth, admin, alice, editor_role, fetch):
        response = await client.put(
            f"/staffs/{alice.id}",
            json={"name": "Alice", "email": alice.email, "role_id": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 200
        updated = await load_user(fetch, alice.id)
        assert verify_password("secret-password", updated.password)
        assert sorted(role.name for role in updated.roles) == ["Editor", "Staff"]

    async def test_new_email_resets_password_to_local_part(
            self, client, auth, admin, alice, editor_role, fetch
    ):
        response = await client.put(
            f"/staffs/{alice.id}",
            json={"name": "Alice", "email": "a.martin@example.com", "role_id": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 200
        updated = await load_user(fetch, alice.id)
        assert updated.email == "a.martin@example.com"
        assert verify_password("a.martin", updated.password)

    async def test_soft_deleted_staff_can_be_updated(self, client, auth, admin, retired, support_role, fetch):
        response = await client.put(
            f"/staffs/{retired.id}",
            json={"name": "Rita R.", "email": retired.email, "role_id": support_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 200
        updated = await load_user(fetch, retired.id)
        assert updated.name == "Rita R."
        assert updated.deleted_at is not None

    async def test_email_of_another_user_is_rejected(self, client, auth, admin, alice, bob, editor_role, fetch):
        response = await client.put(
            f"/staffs/{alice.id}",
            json={"name": "Alice", "email": bob.email, "role_id": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 422
        assert response.json()["message"] == "The email has already been taken."
        assert (await load_user(fetch, alice.id)).email == alice.email

    async def test_unknown_staff_is_404(self, client, auth, admin, editor_role):
        response = await client.put(
            "/staffs/9999",
            json={"name": "Ghost", "email": "ghost@example.com", "role_id": editor_role.id},
            headers=auth(admin),
        )

        assert response.status_code == 404

    async def test_requires_edit_permission(self, client, auth, limited_user, alice, support_role):
        response = await client.put(
            f"/staffs/{alice.id}",
            json={"name": "x", "email": alice.email, "role_id": support_role.id},
            headers=auth(limited_user),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "You don't have enough permissions"


class TestStaffDestroy:
    async def test_soft_deletes_staff(self, client, auth, admin, alice, fetch):
        response = await client.delete(f"/staffs/{alice.id}", headers=auth(admin))

        assert response.status_code == 200
        assert response.json()["message"] == "Staff Deleted Successfully"
        assert (await load_user(fetch, alice.id)).deleted_at is not None

    async def test_deleted_staff_moves_to_trashed_listing(self, client, auth, admin, alice):
        await client.delete(f"/staffs/{alice.id}", headers=auth(admin))

        live = (await client.get("/staffs/show", headers=auth(admin))).json()
        trashed = (await client.get("/staffs/show", params={"show_deleted": 1}, headers=auth(admin))).json()

        assert live["total"] == 0
        assert [row["id"] for row in trashed["rows"]] == [alice.id]

    async def test_already_deleted_staff_is_404(self, client, auth, admin, retired):
        response = await client.delete(f"/staffs/{retired.id}", headers=auth(admin))

        assert response.status_code == 404

    async def test_requires_delete_permission(self, client, auth, limited_user, alice, fetch):
        response = await client.delete(f"/staffs/{alice.id}", headers=auth(limited_user))

        assert response.status_code == 403
        assert (await load_user(fetch, alice.id)).deleted_at is None


class TestStaffChangePassword:
    async def test_resets_password(self, client, auth, admin, alice, fetch):
        response = await client.put(
            f"/staffs/{alice.id}/change-password",
            json={"new_password": "brand-new-pass", "confirm_password": "brand-new-pass"},
            headers=auth(admin),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password Reset Successfully"
        assert verify_password("brand-new-pass", (await load_user(fetch, alice.id)).password)

    @pytest.mark.parametrize(
        "payload",
        [
            {"new_password": "short", "confirm_password": "short"},
            {"new_password": "long-enough-1", "confirm_password": "long-enough-2"},
            {"new_password": "long-enough-1"},
        ],
    )
    async def test_invalid_passwords_are_rejected(self, client, auth, admin, alice, fetch, payload):
        response = await client.put(f"/staffs/{alice.id}/change-password", json=payload, headers=auth(admin))

        assert response.status_code == 422
        assert verify_password("secret-password", (await load_user(fetch, alice.id)).password)

    async def test_html_caller_without_permission_is_redirected(self, client, auth, limited_user, alice):
        response = await client.put(
            f"/staffs/{alice.id}/change-password",
            json={"new_password": "brand-new-pass", "confirm_password": "brand-new-pass"},
            headers=auth(limited_user, **HTML),
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/"
