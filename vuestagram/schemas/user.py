from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

class UserInfo(BaseModel):
    id: int
    account: str
    name: str
    boards_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserInfoResponse(BaseModel):
    code: str = "0"
    msg: str
    data: UserInfo

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    password: Optional[str] = Field(None, min_length=4, max_length=72)
    password_chk: Optional[str] = None

class Registration(BaseModel):
    account: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=4, max_length=72)
    password_chk: str
    name: str = Field(..., min_length=1, max_length=50)
