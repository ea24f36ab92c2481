"""
Search Routes

Semantic search endpoints over the registered content domains. Search is
best-effort: a backend failure answers 200 with an empty list, never 5xx.
"""

from fastapi import APIRouter, Depends, status
from typing import List, Annotated

from .models import (
    SearchRequest,
    MultiSearchRequest,
    CourseSearchRequest,
    UniversitySearchRequest,
    ScholarshipSearchRequest,
    UserContextSearchRequest,
)
from .dependencies import get_search_service
from ..search.facade import SearchService
from ..search.models import SearchResult

router = APIRouter(prefix="/search", tags=["search"])

Service = Annotated[SearchService, Depends(get_search_service)]


@router.post(
    "/",
    response_model=List[SearchResult],
    summary="Semantic search within one domain",
    status_code=status.HTTP_200_OK,
)
async def search(req: SearchRequest, service: Service) -> List[SearchResult]:
    """
    Search one domain, keeping only results at or above the threshold.
    """
    return await service.search_with_metadata(req.query, req.domain, req.options)


@router.post(
    "/multi",
    response_model=List[SearchResult],
    summary="Semantic search across several domains",
)
async def search_multi(req: MultiSearchRequest, service: Service) -> List[SearchResult]:
    """
    Results are grouped by domain in request order, not ranked across domains.
    """
    return await service.search_multiple_domains(req.query, req.domains, req.options)


@router.post("/courses", response_model=List[SearchResult], summary="Search courses")
async def search_courses(req: CourseSearchRequest, service: Service) -> List[SearchResult]:
    return await service.search_courses(req.query, req.filters, req.options)


@router.post("/universities", response_model=List[SearchResult], summary="Search universities")
async def search_universities(
    req: UniversitySearchRequest, service: Service
) -> List[SearchResult]:
    return await service.search_universities(req.query, req.filters, req.options)


@router.post("/scholarships", response_model=List[SearchResult], summary="Search scholarships")
async def search_scholarships(
    req: ScholarshipSearchRequest, service: Service
) -> List[SearchResult]:
    return await service.search_scholarships(req.query, req.filters, req.options)


@router.post("/user", response_model=List[SearchResult], summary="Search a user's own context")
async def search_user_context(
    req: UserContextSearchRequest, service: Service
) -> List[SearchResult]:
    return await service.search_user_context(req.query, req.user_id, req.options)
