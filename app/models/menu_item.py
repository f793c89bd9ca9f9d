"""MenuItem model."""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class MenuItem(Base):
    """Purchasable menu entry."""

    __tablename__ = 'menu'
    __table_args__ = (
        CheckConstraint('discount >= 0', name='menu_discount_non_negative'),
        CheckConstraint('order_count >= 0', name='menu_order_count_non_negative'),
    )

    id = Column(String(32), primary_key=True)
    name = Column(String, nullable=False)
    price = Column(String, nullable=False)  # decimal kept as text
    discount = Column(Integer, nullable=False, default=0, server_default='0')  # percentage
    order_count = Column(Integer, nullable=False, default=0, server_default='0')
    category = Column(String(32), ForeignKey('category.id'), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    category_ref = relationship('Category', foreign_keys=[category])

    def to_dict(self):
        """Wire shape used by the JSON procedures."""
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'discount': self.discount,
            'orderCount': self.order_count,
            'category': self.category,
        }

    def __repr__(self):
        return f"<MenuItem(id='{self.id}', name='{self.name}', price='{self.price}')>"
