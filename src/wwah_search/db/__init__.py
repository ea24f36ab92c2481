"""
Database Package

Provides the lazily connected async SQLAlchemy database, the embeddings
table definitions and the pgvector-backed ``VectorStore`` handle.
"""

from .session import Database, database
from .models import Base, COLLECTION_TABLES
from .vector_store import VectorStore, Document

__all__ = [
    "Database",
    "database",
    "Base",
    "COLLECTION_TABLES",
    "VectorStore",
    "Document",
]
