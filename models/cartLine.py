# one row per (user, product) pair. The unique constraint lives in the table
# itself so concurrent writers (two browser tabs) cannot create duplicates;
# the application never relies on its own ordering for that.
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, UniqueConstraint, Index, func

from models.base import Base


class CartLine(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    product_id = Column(Integer, nullable=False)
    # Owner email at time of write (denormalized)
    email = Column(String, nullable=False)
    title = Column(String, nullable=False, default="")
    price = Column(Float, nullable=False, default=0.0)
    image = Column(String, nullable=True, default="")
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'product_id', name='uq_carts_user_product'),
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        Index('idx_carts_user_id', 'user_id'),
        Index('idx_carts_product_id', 'product_id'),
    )


class CartLineDTO(BaseModel):
    """
    Normalized cart line as exchanged between server and client.

    Serialized with camelCase keys (productId) on the wire.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    product_id: int = Field(alias="productId")
    title: str = ""
    price: float = 0.0
    image: str = ""
    quantity: int = 1

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class CartSnapshotDTO(BaseModel):
    items: list[CartLineDTO] = []
