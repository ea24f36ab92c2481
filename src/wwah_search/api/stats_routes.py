"""
Domain Statistics and Cache Administration

Security
--------
All endpoints are protected by `verify_admin` which requires:
- `x-admin-key` header OR
- `key` query parameter

Endpoints
---------
- Aggregated document counts across all domains
- Document count snapshot for one domain
- Explicit invalidation of cached vector store handles
"""

from typing import Optional, Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Header, status

from ..config import settings
from ..domains import Domain
from ..search.accessor import VectorStoreAccessor
from ..search.models import AggregateStats, DomainStats
from ..search.stats import StatsService
from .dependencies import get_accessor, get_stats_service
from .models import CacheClearRequest, CacheClearResponse

router = APIRouter(prefix="/stats", tags=["stats"])


# ---------------------------------------------------------------------
# Security Dependency
# ---------------------------------------------------------------------

async def verify_admin(
    x_admin_key: Optional[str] = Header(None, alias="x-admin-key"),
    key: Optional[str] = Query(None)
):
    """
    Verify the request is from an admin using the configured API key.
    Checks header first, then query param.
    """
    expected_key = settings.admin_api_key.get_secret_value() if settings.admin_api_key else None

    if not expected_key:
        # No key configured: admin access stays closed
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access is not configured (ADMIN_API_KEY missing)"
        )

    provided_key = x_admin_key or key

    if not provided_key or provided_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or missing admin API key"
        )


# ---------------------------------------------------------------------
# API Endpoints
# ---------------------------------------------------------------------

@router.get("/domains", response_model=AggregateStats, dependencies=[Depends(verify_admin)])
async def get_all_domain_stats(
    stats: Annotated[StatsService, Depends(get_stats_service)],
) -> AggregateStats:
    """
    Document counts for every domain, summed.

    Domains whose count failed are reported with ``available: false``.
    """
    return await stats.get_all_domain_stats()


@router.get(
    "/domains/{domain}",
    response_model=DomainStats,
    dependencies=[Depends(verify_admin)],
)
async def get_domain_stats(
    domain: Domain,
    stats: Annotated[StatsService, Depends(get_stats_service)],
) -> DomainStats:
    return await stats.get_domain_stats(domain)


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    dependencies=[Depends(verify_admin)],
)
async def clear_cache(
    req: CacheClearRequest,
    accessor: Annotated[VectorStoreAccessor, Depends(get_accessor)],
) -> CacheClearResponse:
    """
    Drop cached handles so the next request rebuilds them, e.g. after an
    index was recreated.
    """
    if req.scope == "domain":
        removed = accessor.clear_domain_cache(req.domain)
    elif req.scope == "user":
        removed = accessor.clear_user_cache(req.user_id)
    else:
        removed = accessor.clear_all_caches()

    return CacheClearResponse(
        scope=req.scope,
        removed=removed,
        remaining=len(accessor.cache),
    )
