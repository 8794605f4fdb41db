from enum import Enum


class EnumBase(str, Enum):
    def __str__(self):
        return self.value


class UserRole(EnumBase):
    ADMIN = 'ADMIN'
    USER = 'USER'


class Sex(EnumBase):
    MALE = 'MALE'
    FEMALE = 'FEMALE'
