# tests/test_credentials.py

import pytest

from core.errors import ConflictError, InvalidCredentialsError, ValidationError


class TestRegister:

    def test_stores_only_a_hash(self, credentials, users):
        user_id = credentials.register("alice", "alice@example.com", "secret123")

        stored = users.find_by_id(user_id)
        assert stored["username"] == "alice"
        assert stored["hashed_password"] != "secret123"
        assert stored["hashed_password"].startswith("$2b$")

    def test_duplicate_username(self, credentials):
        credentials.register("alice", "alice@example.com", "secret123")
        with pytest.raises(ConflictError):
            credentials.register("alice", "other@example.com", "secret123")

    def test_duplicate_email(self, credentials):
        credentials.register("alice", "alice@example.com", "secret123")
        with pytest.raises(ConflictError):
            credentials.register("bob", "alice@example.com", "secret123")

    def test_conflict_is_a_validation_error(self):
        assert issubclass(ConflictError, ValidationError)

    @pytest.mark.parametrize("username,email,password", [
        ("al", "alice@example.com", "secret123"),
        ("alice", "not-an-email", "secret123"),
        ("alice", "alice@example.com", "short"),
        (None, "alice@example.com", "secret123"),
        ("alice", None, "secret123"),
        ("alice", "alice@example.com", None),
    ])
    def test_rejects_invalid_input(self, credentials, users, username, email, password):
        with pytest.raises(ValidationError):
            credentials.register(username, email, password)
        assert users.find_all() == []


class TestVerify:

    def test_correct_password(self, credentials):
        user_id = credentials.register("alice", "alice@example.com", "secret123")
        assert credentials.verify("alice", "secret123") == user_id

    def test_unknown_user_and_wrong_password_look_the_same(self, credentials):
        credentials.register("alice", "alice@example.com", "secret123")

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            credentials.verify("alice", "wrong-password")
        with pytest.raises(InvalidCredentialsError) as unknown_user:
            credentials.verify("nobody", "secret123")

        assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
        assert wrong_password.value.status_code == unknown_user.value.status_code == 400
