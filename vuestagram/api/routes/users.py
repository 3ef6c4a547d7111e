import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vuestagram.api.deps import get_current_user
from vuestagram.core.errors import AccountExists, ValidationFailed
from vuestagram.core.security import hash_password
from vuestagram.core.services import build_user_info
from vuestagram.db.models import User
from vuestagram.db.session import get_db
from vuestagram.schemas.user import Registration, UserInfoResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/registration", response_model=UserInfoResponse)
async def register(body: Registration, db: AsyncSession = Depends(get_db)):
    if body.password != body.password_chk:
        raise ValidationFailed("Password confirmation does not match", errors={"password_chk": "mismatch"})

    result = await db.execute(select(User.id).where(User.account == body.account))
    if result.scalar_one_or_none() is not None:
        raise AccountExists()

    user = User(account=body.account, password=hash_password(body.password), name=body.name)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration
        await db.rollback()
        raise AccountExists()
    await db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.account})")
    return {"code": "0", "msg": "Registration complete", "data": await build_user_info(db, user)}


@router.get("/user", response_model=UserInfoResponse)
async def get_user(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"code": "0", "msg": "User loaded", "data": await build_user_info(db, user)}


@router.patch("/user", response_model=UserInfoResponse)
async def update_user(
    body: UserUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change display name and/or password. A new password must be confirmed."""
    if body.password is not None:
        if body.password != body.password_chk:
            raise ValidationFailed("Password confirmation does not match", errors={"password_chk": "mismatch"})
        user.password = hash_password(body.password)
    if body.name is not None:
        user.name = body.name

    await db.commit()
    await db.refresh(user)
    return {"code": "0", "msg": "User updated", "data": await build_user_info(db, user)}
