from __future__ import annotations

import logging
from typing import AsyncGenerator
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_api.core.security import decode_token
from taskboard_api.db.models import Member
from taskboard_api.db.session import get_async_session, company_context
from taskboard_api.repositories.member import MemberRepository

logger = logging.getLogger(__name__)

# Tokens are issued by the external identity service.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


# PUBLIC_INTERFACE
async def get_company_id(x_company_id: str | None = Header(default=None, alias="X-Company-ID")) -> UUID:
    """
    Extract and validate the company id from the X-Company-ID header.

    Raises:
        HTTPException: 400 Bad Request if header missing or invalid UUID.
    Returns:
        UUID: company identifier
    """
    if not x_company_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Company-ID header is required.",
        )
    try:
        return UUID(x_company_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Company-ID header must be a valid UUID string.",
        )


# PUBLIC_INTERFACE
async def get_company_session(
    company_id: UUID = Depends(get_company_id),
    session: AsyncSession = Depends(get_async_session),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession with Row-Level Security configured for the given company.

    The Postgres session GUC `app.company_id` is set while the session is in use,
    then reset after use.
    """
    async with company_context(session, company_id):
        yield session


# PUBLIC_INTERFACE
async def get_current_member(
    company_id: UUID = Depends(get_company_id),
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_company_session),
) -> Member:
    """
    Resolve the acting principal's membership of the requested company.

    Validates the bearer token, ensures its company claim matches the X-Company-ID
    header, and loads the member row that carries the principal's role.
    """
    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    tok_company = payload.get("company_id")
    if not tok_company or str(tok_company) != str(company_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Company mismatch")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    try:
        user_uuid = UUID(str(user_id))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    repo = MemberRepository(session)
    member = await repo.get_member(company_id=company_id, user_id=user_uuid)
    if not member:
        logger.info("User %s has no membership in company %s", user_uuid, company_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a member of this company")
    return member
