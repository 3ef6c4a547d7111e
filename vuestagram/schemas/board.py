from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

class BoardRead(BaseModel):
    id: int
    content: str
    img: str
    user_id: int
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class BoardResponse(BaseModel):
    code: str = "0"
    msg: str
    data: BoardRead

class BoardListResponse(BaseModel):
    code: str = "0"
    msg: str
    data: List[BoardRead]
