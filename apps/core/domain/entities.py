# apps/core/domain/entities.py
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = 'ADMIN'
    ASSIGNER = 'ASSIGNER'
    WORKER = 'WORKER'


@dataclass(frozen=True)
class AuthContext:
    """Tożsamość wywołującego przekazywana jawnie do logiki decyzyjnej."""
    user_id: int
    role: Role
    name: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
