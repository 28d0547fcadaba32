import logging
from datetime import datetime

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError
from starlette import status

from ticketing.config import settings
from ticketing.schema import ActorContext

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)


def create_jwt_token(data: dict, expire_time: datetime):
    data['exp'] = expire_time
    return jwt.encode(data, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_jwt_token(token: str):
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.error(f"Token decode error: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def get_actor_context(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> ActorContext:
    """Resolves the caller and their station/region from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    payload = decode_jwt_token(credentials.credentials)
    if payload.get("user_id") is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    try:
        return ActorContext(user_id=payload["user_id"],
                            role=payload.get("role"),
                            officer_id=payload.get("officer_id"),
                            station_id=payload.get("station_id"),
                            region_id=payload.get("region_id"))
    except ValidationError as e:
        logger.error(f"Token claims rejected: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
