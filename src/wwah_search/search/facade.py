"""
Search Facade

Semantic search across the registered content domains.

Responsibilities
----------------
- Resolve the domain handle and run the similarity search
- Drop candidates below the similarity threshold
- Build structured filters for the course, university and scholarship helpers
- Contain backend failures: public methods log and return an empty list

``try_search`` exposes the underlying ``SearchOutcome`` so callers that care
can tell "nothing matched" apart from "the backend failed".
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ..db.vector_store import Document
from ..domains import Domain, resolve_domain
from .accessor import VectorStoreAccessor
from .filters import (
    CourseFilters,
    ScholarshipFilters,
    UniversityFilters,
    build_course_filter,
    build_scholarship_filter,
    build_university_filter,
)
from .models import SearchOptions, SearchOutcome, SearchResult

logger = logging.getLogger("wwah.search")

USER_DOMAIN = "user"


def _to_results(
    candidates: Iterable[Tuple[Document, float]],
    domain: str,
    options: SearchOptions,
) -> List[SearchResult]:
    """
    Apply the similarity threshold and map survivors to ``SearchResult``.

    A NaN score (zero-norm vector) never clears the threshold.
    """
    results: List[SearchResult] = []
    for document, score in candidates:
        score = float(score)
        if not score >= options.similarity_threshold:
            continue
        results.append(
            SearchResult(
                page_content=document.page_content,
                metadata=dict(document.metadata) if options.include_metadata else {},
                score=min(max(float(score), 0.0), 1.0),
                domain=domain,
            )
        )
    return results


class SearchService:
    """
    Best-effort search facade over a ``VectorStoreAccessor``.
    """

    def __init__(self, accessor: VectorStoreAccessor) -> None:
        self._accessor = accessor

    # ------------------------------------------------------------------
    # Single domain
    # ------------------------------------------------------------------

    async def try_search(
        self,
        query: str,
        domain: Union[Domain, str],
        options: Optional[SearchOptions] = None,
    ) -> SearchOutcome:
        """
        Search one domain and report success or failure explicitly.

        Raises
        ------
        UnknownDomainError
            If the domain is not registered. Backend failures never raise.
        """
        resolved = resolve_domain(domain)
        options = options or SearchOptions()

        try:
            handle = await self._accessor.get_domain_handle(resolved)
            candidates = await handle.similarity_search_with_score(
                query,
                k=options.limit,
                filter=options.filter,
            )
            results = _to_results(candidates, resolved.value, options)
        except Exception as exc:
            logger.exception("Error searching in %s", resolved.value)
            return SearchOutcome(domain=resolved.value, error=exc)

        return SearchOutcome(domain=resolved.value, results=results)

    async def search_with_metadata(
        self,
        query: str,
        domain: Union[Domain, str],
        options: Optional[SearchOptions] = None,
    ) -> List[SearchResult]:
        """
        Search one domain; every returned result scores at least
        ``options.similarity_threshold``. Backend failures yield ``[]``.
        """
        outcome = await self.try_search(query, domain, options)
        return outcome.results

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    async def try_search_multiple_domains(
        self,
        query: str,
        domains: Sequence[Union[Domain, str]],
        options: Optional[SearchOptions] = None,
    ) -> List[SearchOutcome]:
        resolved = [resolve_domain(domain) for domain in domains]
        return list(
            await asyncio.gather(
                *(self.try_search(query, domain, options) for domain in resolved)
            )
        )

    async def search_multiple_domains(
        self,
        query: str,
        domains: Sequence[Union[Domain, str]],
        options: Optional[SearchOptions] = None,
    ) -> List[SearchResult]:
        """
        Run the same query against several domains concurrently.

        Results are concatenated in the order the domains were given, not
        ranked across domains. A failing domain contributes nothing and does
        not affect the others.
        """
        outcomes = await self.try_search_multiple_domains(query, domains, options)
        return [result for outcome in outcomes for result in outcome.results]

    # ------------------------------------------------------------------
    # Domain helpers
    # ------------------------------------------------------------------

    async def search_courses(
        self,
        query: str,
        filters: Optional[CourseFilters] = None,
        options: Optional[SearchOptions] = None,
    ) -> List[SearchResult]:
        return await self.search_with_metadata(
            query,
            Domain.COURSES,
            self._with_filter(options, build_course_filter(filters)),
        )

    async def search_universities(
        self,
        query: str,
        filters: Optional[UniversityFilters] = None,
        options: Optional[SearchOptions] = None,
    ) -> List[SearchResult]:
        return await self.search_with_metadata(
            query,
            Domain.UNIVERSITIES,
            self._with_filter(options, build_university_filter(filters)),
        )

    async def search_scholarships(
        self,
        query: str,
        filters: Optional[ScholarshipFilters] = None,
        options: Optional[SearchOptions] = None,
    ) -> List[SearchResult]:
        return await self.search_with_metadata(
            query,
            Domain.SCHOLARSHIPS,
            self._with_filter(options, build_scholarship_filter(filters)),
        )

    # ------------------------------------------------------------------
    # Personalized search
    # ------------------------------------------------------------------

    async def search_user_context(
        self,
        query: str,
        user_id: Optional[str],
        options: Optional[SearchOptions] = None,
    ) -> List[SearchResult]:
        """
        Search the caller's own embeddings. No user id means no results.
        """
        options = options or SearchOptions()

        try:
            handle = await self._accessor.get_user_handle(user_id)
            if handle is None:
                return []
            candidates = await handle.similarity_search_with_score(
                query,
                k=options.limit,
                filter=options.filter,
            )
            return _to_results(candidates, USER_DOMAIN, options)
        except Exception:
            logger.exception("Error searching user context for %s", user_id)
            return []

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _with_filter(options: Optional[SearchOptions], built: dict) -> SearchOptions:
        options = options or SearchOptions()
        return options.model_copy(update={"filter": built})
