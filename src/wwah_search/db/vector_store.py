"""
Vector Store

PostgreSQL + pgvector similarity search over one embeddings collection.

A ``VectorStore`` is a cheap handle: it holds the session factory, the
embedder, and the table/index it is bound to (optionally narrowed to a single
user). It opens a session per call, so one handle can live for the whole
process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Number
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import Float, Table, case, cast, func, insert, null, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.elements import ColumnElement

from ..core.errors import ConnectivityError
from ..embeddings.embedder import Embedder
from ..search.filters import (
    AtLeast,
    AtMost,
    Condition,
    Contains,
    Equals,
    normalize_filter,
)


@dataclass(frozen=True)
class Document:
    """A stored text chunk and its metadata."""
    page_content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------
# Filter translation
# ---------------------------------------------------------------------

def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def condition_clause(
    metadata_column: ColumnElement,
    field_name: str,
    condition: Condition,
) -> ColumnElement:
    """
    Translate one metadata condition into a SQL boolean expression.

    Numeric operands compare the JSON value cast to float, and only match
    rows where that value is a JSON number; everything else compares its
    text form.
    """
    path = tuple(field_name.split("."))
    node = metadata_column[path]
    as_text = node.astext

    if isinstance(condition, Contains):
        pattern = f"%{_escape_like(condition.value)}%"
        if condition.case_insensitive:
            return as_text.ilike(pattern, escape="\\")
        return as_text.like(pattern, escape="\\")

    value = condition.value
    if isinstance(value, bool):
        operand, value = as_text, "true" if value else "false"
    elif _is_number(value):
        # Non-numeric values ("501-510", "N/A") become NULL instead of failing the cast
        operand = case(
            (func.jsonb_typeof(node) == "number", cast(as_text, Float)),
            else_=null(),
        )
    else:
        operand, value = as_text, str(value)

    if isinstance(condition, Equals):
        return operand == value
    if isinstance(condition, AtMost):
        return operand <= value
    if isinstance(condition, AtLeast):
        return operand >= value

    raise TypeError(f"Unsupported filter condition: {condition!r}")


def filter_clauses(
    metadata_column: ColumnElement,
    raw_filter: Optional[Mapping[str, Any]],
) -> List[ColumnElement]:
    return [
        condition_clause(metadata_column, name, condition)
        for name, condition in normalize_filter(raw_filter).items()
    ]


# ---------------------------------------------------------------------
# Vector store handle
# ---------------------------------------------------------------------

class VectorStore:
    """
    Similarity search handle bound to one collection and vector index.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        embedder: Embedder,
        table: Table,
        index_name: str,
        user_id: Optional[str] = None,
    ) -> None:
        """
        Parameters
        ----------
        session_factory : async_sessionmaker
            Factory from the shared ``Database``.
        embedder : Embedder
            Produces query and document embeddings.
        table : Table
            Embeddings table of the collection.
        index_name : str
            Name of the HNSW index serving the table.
        user_id : Optional[str]
            Restricts every read and write to one user's rows.
        """
        self._session_factory = session_factory
        self._embedder = embedder
        self.table = table
        self.index_name = index_name
        self.user_id = user_id

    @property
    def collection_name(self) -> str:
        return self.table.name

    def _scope_clauses(self) -> List[ColumnElement]:
        if self.user_id is None:
            return []
        return [self.table.c["user_id"] == self.user_id]

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def similarity_search_with_score(
        self,
        query: str,
        k: int = 4,
        filter: Optional[Mapping[str, Any]] = None,
    ) -> List[Tuple[Document, float]]:
        """
        Embed ``query`` and return up to ``k`` closest documents.

        Scores are normalized cosine similarity, ``(1 + cos) / 2``, in [0, 1].

        Raises
        ------
        EmbeddingError
            If the query cannot be embedded.
        ConnectivityError
            If the database query fails.
        """
        query_embedding = await self._embedder.embed_query(query)
        return await self.similarity_search_by_vector_with_score(
            query_embedding, k=k, filter=filter
        )

    async def similarity_search_by_vector_with_score(
        self,
        embedding: Sequence[float],
        k: int = 4,
        filter: Optional[Mapping[str, Any]] = None,
    ) -> List[Tuple[Document, float]]:
        distance = self.table.c["embedding"].cosine_distance(list(embedding))

        stmt = (
            select(
                self.table.c["text"].label("page_content"),
                self.table.c["metadata"].label("doc_metadata"),
                ((2 - distance) / 2).label("score"),
            )
            .where(
                *self._scope_clauses(),
                *filter_clauses(self.table.c["metadata"], filter),
            )
            .order_by(distance)
            .limit(k)
        )

        rows = await self._execute(stmt)

        return [
            (
                Document(
                    page_content=row.page_content,
                    metadata=dict(row.doc_metadata or {}),
                ),
                float(row.score),
            )
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Counting and writes
    # ------------------------------------------------------------------

    async def count_documents(self) -> int:
        stmt = select(func.count()).select_from(self.table).where(*self._scope_clauses())
        rows = await self._execute(stmt)
        return int(rows[0][0]) if rows else 0

    async def add_documents(
        self,
        texts: Sequence[str],
        metadatas: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> int:
        """
        Embed and store documents. Returns the number of rows written.
        """
        if not texts:
            return 0
        if metadatas is not None and len(metadatas) != len(texts):
            raise ValueError("metadatas must match texts in length.")

        embeddings = await self._embedder.embed(texts)

        rows = []
        for i, (content, emb) in enumerate(zip(texts, embeddings)):
            row: Dict[str, Any] = {
                "text": content,
                "metadata": dict(metadatas[i]) if metadatas is not None else {},
                "embedding": emb,
            }
            if self.user_id is not None:
                row["user_id"] = self.user_id
            rows.append(row)

        async with self._session_factory() as session:
            try:
                await session.execute(insert(self.table), rows)
                await session.commit()
            except (SQLAlchemyError, OSError) as exc:
                await session.rollback()
                raise ConnectivityError(
                    f"Failed to write to {self.collection_name}: {type(exc).__name__}"
                ) from exc

        return len(rows)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _execute(self, stmt) -> List[Any]:
        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                return list(result.all())
            except (SQLAlchemyError, OSError) as exc:
                raise ConnectivityError(
                    f"Query against {self.collection_name} failed: {type(exc).__name__}"
                ) from exc
