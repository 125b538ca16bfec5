# server/core/credentials.py

import logging
from passlib.context import CryptContext

from core.errors import ConflictError, InvalidCredentialsError
from core.store import DocumentStore, DuplicateKeyError
from core.validation import validate_login, validate_signup


logger = logging.getLogger(__name__)


def build_password_context(rounds: int = 10) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class CredentialService:
    """
    Registers users and checks their passwords.

    Passwords are stored only as salted bcrypt hashes. Login failures
    raise the same InvalidCredentialsError whether the username is
    unknown or the password is wrong, so the response never reveals
    which usernames exist.
    """

    def __init__(self, users: DocumentStore, pwd_context: CryptContext):
        self.users = users
        self.pwd_context = pwd_context

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def register(self, username, email, password) -> str:
        data = validate_signup({"username": username, "email": email, "password": password})

        existing = self.users.find_one(match_any=True, username=data.username, email=data.email)
        if existing:
            raise ConflictError("Username or email already exists.")

        try:
            user = self.users.insert({
                "username": data.username,
                "email": data.email,
                "hashed_password": self.hash_password(data.password),
            })
        except DuplicateKeyError as e:
            # Lost a race with a concurrent signup for the same name/email
            raise ConflictError("Username or email already exists.") from e

        logger.info(f"Registered user {data.username} ({user['_id']})")
        return user["_id"]

    def verify(self, username, password) -> str:
        data = validate_login({"username": username, "password": password})

        user = self.users.find_one(username=data.username)
        if user is None:
            # Burn comparable time so unknown users are not distinguishable by latency
            self.pwd_context.dummy_verify()
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentialsError()

        if not self.pwd_context.verify(data.password, user["hashed_password"]):
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentialsError()

        return user["_id"]
