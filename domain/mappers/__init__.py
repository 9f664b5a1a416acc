"""
Domain mappers package - ORM to DTO transformations.
"""

from domain.mappers.shopping_mapper import ShoppingMapper

__all__ = ["ShoppingMapper"]
