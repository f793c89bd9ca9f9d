"""Category model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


class Category(Base):
    """Menu category. Created by the admin; never renamed or deleted."""

    __tablename__ = 'category'

    id = Column(String(32), primary_key=True)
    category = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def to_dict(self):
        return {'id': self.id, 'category': self.category}

    def __repr__(self):
        return f"<Category(id='{self.id}', category='{self.category}')>"
