from enum import StrEnum
from typing import Optional

import attrs


class UserRole(StrEnum):
    USER = 'user'
    ADMIN = 'admin'


@attrs.define(frozen=True)
class UserEntity:
    """Authenticated caller, rebuilt from the JWT payload (no DB lookup)"""

    id: int
    role: UserRole = UserRole.USER
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_manage(self, *, owner_id: int) -> bool:
        return self.is_admin or self.id == owner_id
