"""In-memory menu provider."""
import logging
import yaml
from pathlib import Path
from typing import Optional

from quickorder.core.exceptions import OrderValidationError
from quickorder.services.menu.base import Menu, MenuItem, MenuProvider

logger = logging.getLogger(__name__)


class InMemoryMenuProvider(MenuProvider):
    """In-memory menu provider seeded from YAML configuration."""

    def __init__(self, menu_file: Optional[str] = None):
        """Initialize with optional menu file path."""
        if menu_file is None:
            menu_file = Path(__file__).parent / "data" / "menu.yaml"
        self.menu_file = Path(menu_file)
        self._menu: Optional[Menu] = None

    async def _load_menu(self) -> Menu:
        """Load menu from YAML file."""
        if self._menu is None:
            if not self.menu_file.exists():
                # Default menu if file doesn't exist
                self._menu = Menu(
                    items=[
                        MenuItem(
                            name="Margherita Pizza",
                            description="Tomato, mozzarella and basil",
                            price=12.99,
                            category="mains",
                        ),
                        MenuItem(
                            name="French Fries",
                            description="Crispy salted fries",
                            price=3.49,
                            category="sides",
                        ),
                        MenuItem(
                            name="Cola",
                            description="Chilled soft drink",
                            price=1.99,
                            category="drinks",
                        ),
                    ],
                    categories=["mains", "sides", "drinks"],
                )
            else:
                with open(self.menu_file, "r") as f:
                    data = yaml.safe_load(f) or {}
                items = [MenuItem(**item) for item in data.get("items", [])]
                categories = data.get("categories") or []
                for item in items:
                    if item.category and item.category not in categories:
                        categories.append(item.category)
                self._menu = Menu(items=items, categories=categories)
            logger.info(f"[MENU] Loaded {len(self._menu.items)} menu items")
        return self._menu

    async def get_menu(self) -> Menu:
        """Get the full menu."""
        return await self._load_menu()

    async def get_item_by_name(self, item_name: str) -> Optional[MenuItem]:
        """Get a menu item by name."""
        menu = await self._load_menu()
        item_name_lower = item_name.lower().strip()
        for item in menu.items:
            if item.name.lower() == item_name_lower:
                return item
        return None

    async def add_item(self, item: MenuItem) -> MenuItem:
        """Add an item for the lifetime of the process."""
        errors = []
        if not item.name.strip():
            errors.append("name is required")
        elif await self.get_item_by_name(item.name):
            errors.append(f"'{item.name}' is already on the menu")
        if item.price < 0:
            errors.append("price must not be negative")
        if errors:
            raise OrderValidationError(errors)

        menu = await self._load_menu()
        item = item.model_copy(update={"name": item.name.strip()})
        menu.items.append(item)
        if item.category and item.category not in menu.categories:
            menu.categories.append(item.category)
        logger.info(f"[MENU] Added menu item '{item.name}' (${item.price:.2f})")
        return item
