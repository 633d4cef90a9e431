"""Session providers supplying the signed-in user id."""

from typing import Optional

from .errors import Unauthenticated


class Session:
    """A fixed identity, or none when nobody is signed in."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id or None

    def current_user(self) -> Optional[str]:
        return self.user_id

    def sign_in(self, user_id: str) -> None:
        self.user_id = user_id

    def sign_out(self) -> None:
        self.user_id = None

    def require_user(self) -> str:
        """The signed-in user id; raises Unauthenticated when there is none."""
        user_id = self.current_user()
        if user_id is None:
            raise Unauthenticated("User not authenticated")
        return user_id
