"""Domain Entities - Auth"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from typing import Optional, Set

from domain.enums import Role

class User(BaseModel):
    """User Entity"""
    user_id: UUID = Field(default_factory=uuid4)
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    disabled: bool = False
    roles: Set[Role] = Field(default_factory=lambda: {Role.GUEST})

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    def has_any_role(self, *roles: Role) -> bool:
        return any(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    class Config:
        from_attributes = True

class UserInDB(User):
    """User with hashed password for DB storage"""
    hashed_password: str
