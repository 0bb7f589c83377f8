"""Product catalog models using multiple table inheritance."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base
from inheritance import inherits_from, is_a_superclass


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False, unique=True)

    products = relationship("Product", back_populates="category")


@is_a_superclass
class Product(Base):
    """Shared product row; ``type`` records which subtype owns it."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=True)
    type = Column(String(64), nullable=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    category = relationship("Category", back_populates="products")
    reviews = relationship("Review", back_populates="product", cascade="all, delete-orphan")
    stock = relationship("StockLevel", back_populates="product", uselist=False, cascade="all, delete-orphan")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    body = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True)

    product = relationship("Product", back_populates="reviews")


class StockLevel(Base):
    """Warehouse count, one per product row."""

    __tablename__ = "stock_levels"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, unique=True)
    quantity = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="stock")


@inherits_from("product")
class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    author = Column(String(255), nullable=True)
    isbn = Column(String(20), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Ebook(Book):
    """Joined-table subclass of Book; its parent product is tagged ``Ebook``."""

    __tablename__ = "ebooks"

    id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    file_format = Column(String(16), nullable=True)


@inherits_from("product")
class Video(Base):
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True)
    actors = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=True)


class Order(Base):
    """Order line pointing at a product row, whichever subtype owns it."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)

    product = relationship("Product")


Product.validates_presence_of("name")
Review.validates_presence_of("body")


__all__ = ["Category", "Product", "Review", "StockLevel", "Book", "Ebook", "Video", "Order"]
