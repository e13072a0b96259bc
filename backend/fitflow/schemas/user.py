from typing import Annotated, Literal
from pydantic import BaseModel, EmailStr, Field
from enum import Enum
from datetime import datetime

class UserRole(str, Enum):
    user = "user"
    trainer = "trainer"
    admin = "admin"

NameStr = Annotated[str, Field(strip_whitespace=True, min_length=1, max_length=120)]
WeightUnit = Literal["kg", "lb"]

class UserBase(BaseModel):
    email: EmailStr = Field(max_length=255)
    name: NameStr

class UserCreate(UserBase):
    role: UserRole = UserRole.user
    preferred_weight_unit: WeightUnit = "kg"

class PreferencesUpdate(BaseModel):
    preferred_weight_unit: WeightUnit

class UserRead(UserBase):
    id: int
    role: UserRole
    preferred_weight_unit: str
    created_at: datetime
    model_config = {"from_attributes": True}
