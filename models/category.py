from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Category(BaseModel, Base):
    __tablename__ = "categories"

    name = Column(String(64), nullable=False, unique=True, index=True)

    books = relationship("Book", back_populates="category", passive_deletes="all")
