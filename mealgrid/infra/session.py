from typing import Dict, Optional


class Session:
    """Base URL plus bearer token of one signed-in client.

    Handed to RemoteMealStore explicitly so several sessions can coexist.
    """

    def __init__(self, base_url: str, token: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def login(self, token: str) -> None:
        self.token = token

    def logout(self) -> None:
        self.token = None

    def headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


__all__ = ["Session"]
