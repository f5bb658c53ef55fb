from typing import List
from uuid import uuid4

from mealgrid.domain.User import User
from mealgrid.infra import paths
from mealgrid.infra.json_store import FILE_LOCK, load_json, atomic_write


class UserNotFoundError(LookupError):
    pass


class UserRepository:
    def __init__(self, path=None):
        self.path = path or paths.USERS_FILE

    def _load(self) -> List[User]:
        return [User.from_dict(d) for d in load_json(self.path, [])]

    def get(self, user_id: str) -> User:
        for u in self._load():
            if u.id == user_id:
                return u
        raise UserNotFoundError(user_id)

    def get_by_email(self, email: str) -> User:
        wanted = (email or "").strip().lower()
        for u in self._load():
            if u.email.lower() == wanted:
                return u
        raise UserNotFoundError(email)

    def get_or_create(self, google_id: str, email: str, name: str) -> User:
        """Account for a Google identity; created on first login, name/email refreshed after."""
        with FILE_LOCK:
            users = self._load()
            for u in users:
                if u.google_id == google_id:
                    if (u.email, u.name) != (email, name):
                        u.email, u.name = email, name
                        atomic_write(self.path, [x.to_dict() for x in users])
                    return u
            user = User(id=str(uuid4()), google_id=google_id, email=email, name=name)
            users.append(user)
            atomic_write(self.path, [x.to_dict() for x in users])
        return user


__all__ = ["UserRepository", "UserNotFoundError"]
