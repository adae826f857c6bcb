from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Book(BaseModel, Base):
    __tablename__ = "books"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    published_date = Column(Date, nullable=True)  # validated not in future (in schema)
    available = Column(Boolean, nullable=False, default=True)

    # RESTRICT: an author or category cannot be removed while books reference it
    author_id = Column(String(36), ForeignKey("authors.id", ondelete="RESTRICT"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True)

    author = relationship("Author", back_populates="books")
    category = relationship("Category", back_populates="books")

    __table_args__ = (
        Index("ix_books_title", "title"),
    )
