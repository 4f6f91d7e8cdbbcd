"""Menu provider interface."""
from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel


class MenuItem(BaseModel):
    """Menu item model."""

    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None


class Menu(BaseModel):
    """Menu model."""

    items: List[MenuItem]
    categories: List[str] = []


class MenuProvider(ABC):
    """Abstract base class for menu providers."""

    @abstractmethod
    async def get_menu(self) -> Menu:
        """Get the full menu."""
        pass

    @abstractmethod
    async def get_item_by_name(self, item_name: str) -> Optional[MenuItem]:
        """Get a menu item by name (case-insensitive)."""
        pass

    @abstractmethod
    async def add_item(self, item: MenuItem) -> MenuItem:
        """Add an item to the menu."""
        pass
