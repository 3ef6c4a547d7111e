from pydantic import BaseModel, Field

from vuestagram.schemas.user import UserInfo

class LoginRequest(BaseModel):
    account: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class ReissueRequest(BaseModel):
    refreshToken: str

class TokenResponse(BaseModel):
    code: str = "0"
    msg: str
    accessToken: str
    refreshToken: str
    data: UserInfo

class MessageResponse(BaseModel):
    code: str = "0"
    msg: str
