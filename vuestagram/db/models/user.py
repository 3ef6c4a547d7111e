from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from vuestagram.db.base import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    account = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash
    name = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    boards = relationship("Board", back_populates="user", cascade="all, delete-orphan")
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
