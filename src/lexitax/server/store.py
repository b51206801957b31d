"""In-memory state of the mock backend."""

import hashlib
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from lexitax.api.schemas import Conversation, GuestSession
from lexitax.auth.constants import Role
from lexitax.auth.schemas import User
from lexitax.chat.constants import GUEST_QUERY_LIMIT


def _hash_password(password: str, salt: str) -> str:
    return hashlib.sha256(f"{salt}:{password}".encode()).hexdigest()


@dataclass
class StoredUser:
    """A registered user with a salted password hash."""

    user: User
    password_hash: str
    salt: str

    def check_password(self, password: str) -> bool:
        return secrets.compare_digest(self.password_hash, _hash_password(password, self.salt))


@dataclass
class BackendStore:
    """Users, tokens, conversations and guest counters, all in memory."""

    guest_query_limit: int = GUEST_QUERY_LIMIT
    users: dict[str, StoredUser] = field(default_factory=dict)
    tokens: dict[str, str] = field(default_factory=dict)
    conversations: dict[str, Conversation] = field(default_factory=dict)
    guest_sessions: dict[str, GuestSession] = field(default_factory=dict)

    # ========== Users ==========

    def create_user(self, email: str, password: str, full_name: str) -> User:
        now = datetime.now(UTC)
        user = User(
            id=uuid.uuid4().hex,
            email=email,
            full_name=full_name,
            role=Role.USER,
            created_at=now,
            updated_at=now,
        )
        salt = secrets.token_hex(8)
        self.users[email.lower()] = StoredUser(
            user=user, password_hash=_hash_password(password, salt), salt=salt
        )
        return user

    def get_user_by_email(self, email: str) -> StoredUser | None:
        return self.users.get(email.lower())

    def authenticate(self, email: str, password: str) -> User | None:
        stored = self.get_user_by_email(email)
        if stored is None or not stored.check_password(password):
            return None
        return stored.user

    # ========== Tokens ==========

    def issue_token(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        self.tokens[token] = user.email.lower()
        return token

    def revoke_token(self, token: str) -> None:
        self.tokens.pop(token, None)

    def user_for_token(self, token: str) -> User | None:
        email = self.tokens.get(token)
        if email is None:
            return None
        stored = self.users.get(email)
        return stored.user if stored else None

    # ========== Conversations ==========

    def create_conversation(self, user_id: str | None, title: str) -> Conversation:
        now = datetime.now(UTC)
        conversation = Conversation(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=title or "New Conversation",
            is_guest=user_id is None,
            created_at=now,
            updated_at=now,
        )
        self.conversations[conversation.id] = conversation
        return conversation

    def list_conversations(self, user_id: str) -> list[Conversation]:
        owned = [c for c in self.conversations.values() if c.user_id == user_id]
        return sorted(owned, key=lambda c: c.created_at, reverse=True)

    def get_conversation(self, conversation_id: str, user_id: str) -> Conversation | None:
        conversation = self.conversations.get(conversation_id)
        if conversation is None or conversation.user_id != user_id:
            return None
        return conversation

    # ========== Guests ==========

    def guest_session(self, guest_key: str) -> GuestSession:
        """The guest's session, opened on first use."""
        session = self.guest_sessions.get(guest_key)
        if session is None:
            session = GuestSession(session_id=guest_key, queries_limit=self.guest_query_limit)
            self.guest_sessions[guest_key] = session
        return session

    def guest_queries_used(self, guest_key: str) -> int:
        session = self.guest_sessions.get(guest_key)
        return session.queries_used if session else 0

    def record_guest_query(self, guest_key: str) -> int:
        session = self.guest_session(guest_key)
        session.queries_used += 1
        return session.queries_used
