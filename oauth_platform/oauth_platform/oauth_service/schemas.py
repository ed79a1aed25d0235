from pydantic import BaseModel, Field, field_validator

from typing import Optional


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    email: Optional[str] = None
    display_name: Optional[str] = None

    # Browsers submit empty form fields as ""
    @field_validator("email", "display_name", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class UserLogin(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
