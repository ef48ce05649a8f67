from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from .mixin import CamelModel

class UserBase(BaseModel):
	email: EmailStr
	name: str = Field(..., min_length=1, max_length=100)

class UserCreate(UserBase):
	password: str = Field(..., min_length=8, max_length=128)

	@field_validator('name')
	@classmethod
	def strip_name(cls, v: str) -> str:
		if not v.strip():
			raise ValueError("Name cannot be empty or only whitespace")
		return v.strip()

class UserRead(CamelModel):
	id: int
	email: Optional[str] = None
	name: str
	avatar_url: Optional[str] = None
	is_verified: bool = False

class UserUpdate(CamelModel):
	name: Optional[str] = Field(default=None, min_length=1, max_length=100)
	avatar_url: Optional[str] = None
