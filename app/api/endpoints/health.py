"""
Health check endpoints for system monitoring.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from supabase import Client
from typing import Dict, Any

from ...core.database import get_supabase_admin_client

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, str]:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "Podcast API"}


@router.get("/health/database")
async def database_health_check(
    supabase: Client = Depends(get_supabase_admin_client)
) -> Dict[str, Any]:
    """Check that the podcast tables are reachable."""
    try:
        supabase.table('categories').select('id').limit(1).execute()
        return {"status": "healthy", "service": "Supabase", "connected": True}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        raise HTTPException(status_code=503, detail="Database health check failed")
