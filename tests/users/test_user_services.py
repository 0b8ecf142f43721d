import pytest
from werkzeug.security import generate_password_hash

from trackly.core.enums import Role
from trackly.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from trackly.users.model import User
from trackly.users.service import AuthService, UserService

from tests.fakes import ADMIN, ALICE, InMemoryUsers, user_from_session


def users_with_password():
    return InMemoryUsers(
        [
            User(user_id=1, name=None, email="admin@trackly.local", password_hash=generate_password_hash("admin123"), role=Role.ADMIN),
            User(
                user_id=2,
                name="Alice",
                email="alice@trackly.local",
                password_hash=generate_password_hash("alice123"),
                role=Role.USER,
                disabled=True,
            ),
        ]
    )


def test_authenticate_returns_session_user():
    s_user = AuthService(users_with_password()).authenticate(" Admin@Trackly.local ", "admin123")

    assert s_user.user_id == 1
    assert s_user.is_admin is True
    assert s_user.name == "admin@trackly.local"


@pytest.mark.parametrize(
    "email,password",
    [("admin@trackly.local", "wrong"), ("nobody@trackly.local", "x"), ("alice@trackly.local", "alice123")],
)
def test_authenticate_rejects_bad_credentials_and_disabled_users(email, password):
    with pytest.raises(AuthenticationError):
        AuthService(users_with_password()).authenticate(email, password)


def test_create_user_validates_and_hashes_password():
    repo = InMemoryUsers([user_from_session(ADMIN)])
    service = UserService(repo)

    user_id = service.create_user(ADMIN, name="Bob", email="Bob@Trackly.local", password="secret1")

    created = repo.get_by_id(user_id)
    assert created.email == "bob@trackly.local"
    assert created.password_hash != "secret1"
    with pytest.raises(ValidationError):
        service.create_user(ADMIN, name="Bob", email="bob@trackly.local", password="secret1")
    with pytest.raises(ValidationError):
        service.create_user(ADMIN, name="Eve", email="eve@trackly.local", password="123")
    with pytest.raises(AuthorizationError):
        service.create_user(ALICE, name="Eve", email="eve@trackly.local", password="secret1")


def test_admin_cannot_disable_self():
    repo = InMemoryUsers([user_from_session(ADMIN), user_from_session(ALICE)])
    service = UserService(repo)

    with pytest.raises(ValidationError):
        service.set_disabled(ADMIN, user_id=ADMIN.user_id, disabled=True)
    service.set_disabled(ADMIN, user_id=ALICE.user_id, disabled=True)

    assert repo.get_by_id(ALICE.user_id).disabled is True


def test_set_name_updates_own_profile():
    repo = InMemoryUsers([user_from_session(ALICE, name=None)])

    UserService(repo).set_name(ALICE, name="  Alice Liddell ")

    assert repo.get_by_id(ALICE.user_id).name == "Alice Liddell"


def test_admin_changes_roles_but_cannot_demote_self():
    repo = InMemoryUsers([user_from_session(ADMIN), user_from_session(ALICE)])
    service = UserService(repo)

    service.set_role(ADMIN, user_id=ALICE.user_id, role="admin")

    assert repo.get_by_id(ALICE.user_id).role == Role.ADMIN
    with pytest.raises(ValidationError):
        service.set_role(ADMIN, user_id=ADMIN.user_id, role=Role.USER)
    with pytest.raises(ValidationError):
        service.set_role(ADMIN, user_id=ALICE.user_id, role="owner")
    with pytest.raises(NotFoundError):
        service.set_role(ADMIN, user_id=42, role="user")
    with pytest.raises(AuthorizationError):
        service.set_role(ALICE, user_id=ADMIN.user_id, role="user")
    assert repo.get_by_id(ADMIN.user_id).role == Role.ADMIN
