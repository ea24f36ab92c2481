"""
SQLAlchemy Schema

One embeddings table per registered collection, plus the shared per-user
collection. Each table carries the raw text, a JSONB metadata document and a
pgvector column with an HNSW cosine index named after the domain's index
identifier.
"""

from __future__ import annotations

from typing import Dict

from sqlalchemy import (
    Column,
    Index,
    Integer,
    String,
    Table,
    Text,
    text as sa_text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from pgvector.sqlalchemy import Vector

from ..config import settings
from ..domains import DOMAIN_REGISTRY, USER_COLLECTION_NAME, USER_INDEX_NAME


class Base(DeclarativeBase):
    """Base class holding the shared metadata."""
    pass


def _embedding_table(name: str, index_name: str, user_scoped: bool = False) -> Table:
    columns = [
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("text", Text, nullable=False),
        Column(
            "metadata",
            JSONB,
            nullable=False,
            server_default=sa_text("'{}'::jsonb"),
        ),
        Column("embedding", Vector(settings.embedding_dimensions), nullable=False),
    ]
    if user_scoped:
        columns.insert(1, Column("user_id", String(64), nullable=False, index=True))

    table = Table(name, Base.metadata, *columns)

    Index(
        index_name,
        table.c["embedding"],
        postgresql_using="hnsw",
        postgresql_with={"m": 16, "ef_construction": 64},
        postgresql_ops={"embedding": "vector_cosine_ops"},
    )
    return table


COLLECTION_TABLES: Dict[str, Table] = {
    descriptor.collection_name: _embedding_table(
        descriptor.collection_name, descriptor.index_name
    )
    for descriptor in DOMAIN_REGISTRY.values()
}

COLLECTION_TABLES[USER_COLLECTION_NAME] = _embedding_table(
    USER_COLLECTION_NAME, USER_INDEX_NAME, user_scoped=True
)
