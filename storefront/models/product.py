from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime
from enum import Enum


class Category(str, Enum):
    book = "Book"
    stationery = "Stationery"
    gift = "Gift"
    sport = "Sport"


class UnitType(str, Enum):
    piece = "Piece"
    packet = "Packet"


class Product(SQLModel, table=True):
    #main info
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=200)
    description: str = ""
    category: Category = Field(index=True)

    #books only
    sub_category: Optional[str] = None
    academic_category: Optional[str] = None
    class_name: Optional[str] = None

    #images, first one is the thumbnail
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    #pricing
    price: float
    market_price: Optional[float] = None
    price_to_sell: Optional[float] = None
    price_per_piece: Optional[float] = None
    price_per_packet: Optional[float] = None

    sales_count: int = 0
    created_by: Optional[int] = Field(default=None, foreign_key="user.id")

    #timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def thumbnail(self) -> Optional[str]:
        return self.images[0] if self.images else None
