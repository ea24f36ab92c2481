from fastapi import APIRouter

from ..config import settings
from ..domains import all_domains

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    return {
        "status": "ok",
        "embedding_model": settings.embedding_model,
        "domains": [domain.value for domain in all_domains()],
    }
