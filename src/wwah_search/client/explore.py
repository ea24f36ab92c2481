"""
Explore Section

View-model behind the "Explore More Universities!" course slider: one fetch
of up to four courses matching a course name, rendered as image + title
cards.

The owning view passes a ``CancellationToken`` (or calls ``unmount``); a
response that arrives after cancellation is discarded. ``mount`` starts a
fresh lifecycle for a section that is shown again.
"""

from __future__ import annotations

import html
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .courses import CoursesClient

logger = logging.getLogger("wwah.explore")

MAX_ITEMS = 4
FALLBACK_IMAGE = "/fallback-image.jpg"


class CancellationToken:

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ExploreCard(BaseModel):
    image: str
    title: str

    model_config = ConfigDict(frozen=True)


def _banner_of(item: Dict[str, Any]) -> Optional[str]:
    university = item.get("universityData")
    if not isinstance(university, dict):
        return None
    images = university.get("universityImages")
    if not isinstance(images, dict):
        return None
    return images.get("banner") or None


class ExploreSection:
    """
    Parameters
    ----------
    region : str
        Place named in the section blurb.
    course : str
        Course name used as the search filter.
    client : CoursesClient
        Internal courses API client.
    """

    def __init__(self, region: str, course: str, client: CoursesClient) -> None:
        self.region = region
        self.course = course
        self._client = client
        self._token = CancellationToken()
        self.courses: List[Dict[str, Any]] = []

    def mount(self) -> None:
        """Start a new lifecycle; loads after a previous ``unmount`` apply again."""
        self._token = CancellationToken()

    def unmount(self) -> None:
        self._token.cancel()

    async def load(self, cancel_token: Optional[CancellationToken] = None) -> None:
        """
        Fetch the courses once. Never raises; failures leave an empty list.
        """
        lifecycle = self._token
        token = cancel_token or lifecycle

        try:
            data = await self._client.get_courses(self.course, limit=MAX_ITEMS)
        except Exception:
            logger.exception("Error fetching courses for %r", self.course)
            courses: List[Dict[str, Any]] = []
        else:
            raw = data.get("courses") if isinstance(data, dict) else None
            if isinstance(raw, list):
                courses = [item for item in raw if isinstance(item, dict)]
            else:
                logger.error("Invalid courses response: %r", data)
                courses = []

        if token.cancelled or lifecycle.cancelled:
            logger.debug("Explore section unmounted, discarding %d courses", len(courses))
            return

        self.courses = courses

    def render(self) -> List[ExploreCard]:
        return [
            ExploreCard(
                image=_banner_of(item) or FALLBACK_IMAGE,
                title=str(item.get("course_titel") or ""),
            )
            for item in self.courses[:MAX_ITEMS]
        ]

    def render_html(self) -> str:
        cards = "".join(
            '<div class="explore-card">'
            f'<img src="{html.escape(card.image)}" alt="University Banner" width="430" height="350">'
            f"<p>{html.escape(card.title)}</p>"
            "</div>"
            for card in self.render()
        )
        return (
            '<section class="explore-section">'
            "<h6>Explore More Universities!</h6>"
            f"<p>Discover the exciting world of universities in the {html.escape(self.region)}, "
            "where you can gain a high-quality education and experience life in a new "
            "culture. Explore the perfect fit for your academic and career aspirations!</p>"
            f'<div class="explore-slider">{cards}</div>'
            "</section>"
        )
