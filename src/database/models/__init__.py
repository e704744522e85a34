# Import all models to ensure they are registered with SQLAlchemy

from .product import Product, ProductPrice

__all__ = ["Product", "ProductPrice"]
