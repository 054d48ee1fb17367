"""
Authentication middleware and dependencies.
Handles JWT token validation and user lookup for protected routes.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from app.core.database import get_supabase_admin_client
from app.services.auth_service import verify_token
from app.services.podcast_store import USER_PUBLIC_COLUMNS

# Security scheme for JWT tokens
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    supabase: Client = Depends(get_supabase_admin_client)
) -> dict:
    """
    Dependency to get current authenticated user from JWT token.
    The returned row never carries the password hash.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # Verify JWT token
    token = credentials.credentials
    payload = verify_token(token)

    if payload is None:
        raise credentials_exception

    # Extract user ID from token
    user_id = payload.get("user_id")
    if user_id is None:
        raise credentials_exception

    # Get user from Supabase
    try:
        result = supabase.table('users').select(USER_PUBLIC_COLUMNS).eq('id', user_id).execute()
    except Exception:
        raise credentials_exception

    if not result.data:
        raise credentials_exception

    user = result.data[0]
    if not user.get('is_active', True):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated"
        )

    return user
