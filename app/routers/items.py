"""
Item API routes.

  POST /api/items                               → create an item
  GET  /api/items                               → all items
  GET  /api/items/search?name=                  → all case-insensitive name matches
  GET  /api/items/category/{categoryId}         → items attached to a category
  GET  /api/items/subcategory/{subCategoryId}   → items attached to a sub-category
  GET  /api/items/{id}                          → one item
  PUT  /api/items/{id}                          → partial update (total re-derived)
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.catalog import ItemCreate, ItemResponse, ItemUpdate
from app.schemas.common import DataResponse, ListResponse
from app.services.catalog.items import ItemHandler
from app.services.catalog.repository import CatalogRepository
from app.settings import settings

router = APIRouter(prefix=f"{settings.api_prefix}/items", tags=["items"])


def get_handler(db: Session = Depends(get_db)) -> ItemHandler:
    return ItemHandler(CatalogRepository(db))


def _views(items) -> list[ItemResponse]:
    return [ItemResponse.model_validate(i) for i in items]


@router.post(
    "",
    response_model=DataResponse[ItemResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_item(
    payload: ItemCreate,
    handler: ItemHandler = Depends(get_handler),
) -> DataResponse[ItemResponse]:
    item = handler.create(payload)
    return DataResponse[ItemResponse](
        message="Item created successfully", data=ItemResponse.model_validate(item)
    )


@router.get(
    "",
    response_model=ListResponse[ItemResponse],
    response_model_exclude_none=True,
)
def list_items(handler: ItemHandler = Depends(get_handler)) -> ListResponse[ItemResponse]:
    items = handler.list_all()
    return ListResponse[ItemResponse](count=len(items), data=_views(items))


@router.get(
    "/search",
    response_model=ListResponse[ItemResponse],
    response_model_exclude_none=True,
)
def search_items(
    name: Optional[str] = None,
    handler: ItemHandler = Depends(get_handler),
) -> ListResponse[ItemResponse]:
    items = handler.search(name)
    return ListResponse[ItemResponse](
        count=len(items), data=_views(items), search_term=name
    )


@router.get(
    "/category/{category_id}",
    response_model=ListResponse[ItemResponse],
    response_model_exclude_none=True,
)
def list_items_for_category(
    category_id: str,
    handler: ItemHandler = Depends(get_handler),
) -> ListResponse[ItemResponse]:
    category, items = handler.list_for_category(category_id)
    return ListResponse[ItemResponse](
        count=len(items), data=_views(items), category=category.name
    )


@router.get(
    "/subcategory/{sub_category_id}",
    response_model=ListResponse[ItemResponse],
    response_model_exclude_none=True,
)
def list_items_for_sub_category(
    sub_category_id: str,
    handler: ItemHandler = Depends(get_handler),
) -> ListResponse[ItemResponse]:
    sub_category, items = handler.list_for_sub_category(sub_category_id)
    return ListResponse[ItemResponse](
        count=len(items), data=_views(items), subcategory=sub_category.name
    )


@router.get(
    "/{item_id}",
    response_model=DataResponse[ItemResponse],
    response_model_exclude_none=True,
)
def get_item(
    item_id: str,
    handler: ItemHandler = Depends(get_handler),
) -> DataResponse[ItemResponse]:
    return DataResponse[ItemResponse](data=ItemResponse.model_validate(handler.get(item_id)))


@router.put(
    "/{item_id}",
    response_model=DataResponse[ItemResponse],
    response_model_exclude_none=True,
)
def update_item(
    item_id: str,
    payload: ItemUpdate,
    handler: ItemHandler = Depends(get_handler),
) -> DataResponse[ItemResponse]:
    item = handler.update(item_id, payload)
    return DataResponse[ItemResponse](
        message="Item updated successfully", data=ItemResponse.model_validate(item)
    )
