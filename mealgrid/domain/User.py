"""User domain entity: an account created on first Google login."""


class User:
    def __init__(self, id: str = "", google_id: str = "", email: str = "", name: str = ""):
        self.id = id
        self.google_id = google_id
        self.email = email
        self.name = name

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return User(d.get("id", ""), d.get("google_id", ""), d.get("email", ""), d.get("name", ""))

    def to_dict(self):
        return {"id": self.id, "google_id": self.google_id, "email": self.email, "name": self.name}

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"

    __repr__ = __str__
