"""The acting user, as asserted by the authentication provider.

The ordering context trusts this claim for authorization decisions; it never
checks credentials itself.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    user_id: str
    is_admin: bool = False

    @classmethod
    def admin(cls, user_id: str = "admin") -> "Actor":
        return cls(user_id=user_id, is_admin=True)

    def owns(self, owner_id) -> bool:
        return owner_id is not None and str(owner_id) == str(self.user_id)
