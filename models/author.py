from sqlalchemy import Column, Date, String, Text
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Author(BaseModel, Base):
    __tablename__ = "authors"

    name = Column(String(128), nullable=False)  # not unique; validate non-empty in schema
    biography = Column(Text, nullable=True)
    birth_date = Column(Date, nullable=True)

    # passive_deletes="all" keeps the ORM from nulling book.author_id on delete
    books = relationship("Book", back_populates="author", passive_deletes="all")
