"""
Tests for account registration, login and token verification.
"""

import pytest

from chatboard.auth.accounts import AccountService, generate_token
from chatboard.auth.argon2_utils import create_hasher, hash_password, verify_password
from chatboard.exceptions import AuthenticationError, ConflictError, ValidationError
from chatboard.tests.fakes import FakeChatStore


@pytest.fixture
def hasher():
    return create_hasher(time_cost=1, memory_cost=1024)


@pytest.fixture
def accounts(fake_store: FakeChatStore, hasher) -> AccountService:
    return AccountService(fake_store, hasher)


class TestRegister:
    """AccountService.register()."""

    @pytest.mark.asyncio
    async def test_register_issues_token_and_hashes_password(self, accounts: AccountService, fake_store, hasher):
        """Test that registration stores an Argon2 hash and returns the user's token."""
        result = await accounts.register("alice", "secret")

        user = fake_store.users["alice"]
        assert result.username == "alice"
        assert result.token == user.token
        assert user.password_hash != "secret"
        assert user.password_hash.startswith("$argon2id$")
        assert verify_password(hasher, "secret", user.password_hash)

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, accounts: AccountService):
        """Test that a taken username is a conflict."""
        await accounts.register("alice", "secret")

        with pytest.raises(ConflictError) as exc_info:
            await accounts.register("alice", "other")

        assert exc_info.value.user_friendly == "This username is already taken"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", ["ab", "has space", "", None, "x" * 21])
    async def test_register_invalid_username(self, accounts: AccountService, fake_store, username):
        """Test that malformed usernames never reach the store."""
        with pytest.raises(ValidationError) as exc_info:
            await accounts.register(username, "secret")

        assert exc_info.value.field == "username"
        assert fake_store.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["abc", "", None])
    async def test_register_short_password(self, accounts: AccountService, password):
        """Test that passwords under four characters are refused."""
        with pytest.raises(ValidationError) as exc_info:
            await accounts.register("alice", password)

        assert exc_info.value.field == "password"
        assert "min 4" in exc_info.value.user_friendly


class TestLogin:
    """AccountService.login()."""

    @pytest.mark.asyncio
    async def test_login_rotates_token(self, accounts: AccountService):
        """Test that login issues a new token and the old one stops working."""
        registered = await accounts.register("alice", "secret")

        logged_in = await accounts.login("alice", "secret")

        assert logged_in.token != registered.token
        assert await accounts.verify_token(logged_in.token) == "alice"
        with pytest.raises(AuthenticationError):
            await accounts.verify_token(registered.token)

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, accounts: AccountService):
        """Test that a bad password is an authentication error."""
        await accounts.register("alice", "secret")

        with pytest.raises(AuthenticationError) as exc_info:
            await accounts.login("alice", "wrong")

        assert exc_info.value.user_friendly == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, accounts: AccountService):
        """Test that an unknown user gets the same message as a bad password."""
        with pytest.raises(AuthenticationError) as exc_info:
            await accounts.login("nobody", "secret")

        assert exc_info.value.user_friendly == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_login_skips_length_rule(self, accounts: AccountService):
        """Test that a short wrong password is an authentication error, not a validation error."""
        await accounts.register("alice", "secret")

        with pytest.raises(AuthenticationError):
            await accounts.login("alice", "ab")


class TestVerifyToken:
    """AccountService.verify_token()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", 123, "not-a-token"])
    async def test_invalid_tokens(self, accounts: AccountService, token):
        """Test that missing, malformed or unknown tokens fail with Invalid token."""
        with pytest.raises(AuthenticationError) as exc_info:
            await accounts.verify_token(token)

        assert exc_info.value.user_friendly == "Invalid token"

    @pytest.mark.asyncio
    async def test_store_failure_is_authentication_failure(self, accounts: AccountService, fake_store):
        """Test that a lookup failure never lets a token through."""
        fake_store.add_user("alice", "tok")
        fake_store.fail_operations.add("find_user_by_token")

        with pytest.raises(AuthenticationError):
            await accounts.verify_token("tok")


class TestArgon2Utils:
    """Hasher construction and hashing helpers."""

    def test_hash_and_verify(self, hasher):
        """Test a hash round trip and a mismatch."""
        hashed = hash_password(hasher, "pw1234")

        assert verify_password(hasher, "pw1234", hashed)
        assert not verify_password(hasher, "other", hashed)

    def test_verify_against_garbage_hash(self, hasher):
        """Test that an unparseable hash verifies as False."""
        assert verify_password(hasher, "pw", "not-a-hash") is False
        assert verify_password(hasher, "pw", "") is False

    @pytest.mark.parametrize(
        "kwargs",
        [{"time_cost": 0}, {"time_cost": 11}, {"memory_cost": 512}, {"parallelism": 0}, {"parallelism": 17}],
    )
    def test_create_hasher_rejects_unsafe_parameters(self, kwargs):
        """Test parameter bounds."""
        with pytest.raises(ValueError):
            create_hasher(**kwargs)

    def test_generate_token_is_unique(self):
        """Test that tokens do not repeat."""
        assert len({generate_token() for _ in range(100)}) == 100
