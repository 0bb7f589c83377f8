from .catalog import Book, Category, Ebook, Order, Product, Review, StockLevel, Video  # noqa: F401
