"""Menu repository."""
from typing import Optional

from quickorder.services.menu.base import Menu, MenuItem, MenuProvider


class MenuRepository:
    """Repository for menu operations."""

    def __init__(self, provider: MenuProvider):
        self.provider = provider

    async def get_menu(self) -> Menu:
        """Get the full menu."""
        return await self.provider.get_menu()

    async def get_item_by_name(self, item_name: str) -> Optional[MenuItem]:
        """Get item by name."""
        return await self.provider.get_item_by_name(item_name)

    async def get_item_price(self, item_name: str) -> Optional[float]:
        """Price of the menu item the text names exactly, if any."""
        item = await self.provider.get_item_by_name(item_name)
        return item.price if item else None

    async def add_item(self, item: MenuItem) -> MenuItem:
        """Add an item to the menu."""
        return await self.provider.add_item(item)

    async def get_menu_text(self) -> str:
        """Get menu as formatted text for bot prompts."""
        menu = await self.get_menu()
        lines = []
        for item in menu.items:
            desc_str = f" - {item.description}" if item.description else ""
            lines.append(f"- {item.name} (${item.price:.2f}){desc_str}")
        return "\n".join(lines)
