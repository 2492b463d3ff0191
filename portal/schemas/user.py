from enum import Enum
from pydantic import BaseModel, Field
from portal.core.ids import generate_id

class UserRole(str, Enum):
    HR = "hr"
    FINANCE = "finance"
    TEACHER = "teacher"

# NOT SECURE: plaintext demo credentials, never use for real accounts.
class User(BaseModel):
    id: str = Field(default_factory=lambda: generate_id("u"))
    email: str
    name: str
    role: UserRole
    password: str

def default_users() -> list:
    return [
        User(email="hr@flawless.local", name="HR Admin", role=UserRole.HR, password="hrpass"),
        User(email="finance@flawless.local", name="Finance", role=UserRole.FINANCE, password="finpass"),
        User(email="teacher@flawless.local", name="Teacher", role=UserRole.TEACHER, password="teachpass"),
    ]
