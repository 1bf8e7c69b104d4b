"""SQLAlchemy ORM model for chunk embeddings stored in a pgvector column."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from pgvector.sqlalchemy import Vector

from app.config import get_settings
from app.infrastructure.database.base import Base

EMBEDDING_DIMENSIONS = get_settings().embedding_dimensions


class EmbeddingModel(Base):
    """A chunk of a resource with its embedding vector.

    Rows are written in one batch right after their resource is created.
    No ANN index is declared: similarity search is an exact sequential scan.
    """

    __tablename__ = "embeddings"

    # Autoincrement id doubles as insertion order for search tie-breaks
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(Vector(EMBEDDING_DIMENSIONS), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<EmbeddingModel(id={self.id}, resource_id='{self.resource_id}')>"
