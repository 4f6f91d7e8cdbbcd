"""Menu API endpoints."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from typing import List, Optional

from quickorder.api.auth import require_auth
from quickorder.api.errors import to_http_exception
from quickorder.core.dependencies import get_menu_repository
from quickorder.services.menu.base import MenuItem
from quickorder.services.menu.repository import MenuRepository

router = APIRouter()
logger = logging.getLogger(__name__)


class MenuItemResponse(BaseModel):
    """Menu item response model."""
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None

    class Config:
        from_attributes = True


class MenuResponse(BaseModel):
    """Menu response model."""
    items: List[MenuItemResponse]
    categories: List[str] = []


class MenuItemCreate(BaseModel):
    """New menu item request model."""
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None


@router.get("/api/menu", response_model=MenuResponse)
async def get_menu(
    request: Request,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Get the full menu."""
    logger.info(
        f"[MENU] Request received - Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        menu = await menu_repository.get_menu()
        logger.info(f"[MENU] Menu loaded - {len(menu.items)} items, {len(menu.categories)} categories")

        return MenuResponse(
            items=[MenuItemResponse.model_validate(item) for item in menu.items],
            categories=menu.categories
        )

    except Exception as e:
        logger.error(
            f"[MENU] Error fetching menu - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching menu: {str(e)}")


@router.post("/api/menu/items", response_model=MenuItemResponse, status_code=201)
async def add_menu_item(
    item_req: MenuItemCreate,
    _: bool = Depends(require_auth),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Add an item to the menu (admin only)."""
    logger.info(f"[MENU] Add item requested - Name: '{item_req.name}', Price: {item_req.price}")

    try:
        item = await menu_repository.add_item(MenuItem(**item_req.model_dump()))
        return MenuItemResponse.model_validate(item)

    except Exception as e:
        raise to_http_exception(e, "MENU")
