"""
Category API routes.

  POST /api/categories                 → create a category
  GET  /api/categories                 → all categories, newest first
  GET  /api/categories/search?name=    → first case-insensitive name match
  GET  /api/categories/{id}            → one category
  PUT  /api/categories/{id}            → partial update
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.catalog import CategoryCreate, CategoryResponse, CategoryUpdate
from app.schemas.common import DataResponse, ListResponse
from app.services.catalog.categories import CategoryHandler
from app.services.catalog.repository import CatalogRepository
from app.settings import settings

router = APIRouter(prefix=f"{settings.api_prefix}/categories", tags=["categories"])


def get_handler(db: Session = Depends(get_db)) -> CategoryHandler:
    return CategoryHandler(CatalogRepository(db))


@router.post(
    "",
    response_model=DataResponse[CategoryResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: CategoryCreate,
    handler: CategoryHandler = Depends(get_handler),
) -> DataResponse[CategoryResponse]:
    category = handler.create(payload)
    return DataResponse[CategoryResponse](
        message="Category created successfully",
        data=CategoryResponse.model_validate(category),
    )


@router.get(
    "",
    response_model=ListResponse[CategoryResponse],
    response_model_exclude_none=True,
)
def list_categories(
    handler: CategoryHandler = Depends(get_handler),
) -> ListResponse[CategoryResponse]:
    categories = handler.list_all()
    return ListResponse[CategoryResponse](
        count=len(categories),
        data=[CategoryResponse.model_validate(c) for c in categories],
    )


@router.get(
    "/search",
    response_model=DataResponse[CategoryResponse],
    response_model_exclude_none=True,
)
def search_category(
    name: Optional[str] = None,
    handler: CategoryHandler = Depends(get_handler),
) -> DataResponse[CategoryResponse]:
    category = handler.search(name)
    return DataResponse[CategoryResponse](data=CategoryResponse.model_validate(category))


@router.get(
    "/{category_id}",
    response_model=DataResponse[CategoryResponse],
    response_model_exclude_none=True,
)
def get_category(
    category_id: str,
    handler: CategoryHandler = Depends(get_handler),
) -> DataResponse[CategoryResponse]:
    category = handler.get(category_id)
    return DataResponse[CategoryResponse](data=CategoryResponse.model_validate(category))


@router.put(
    "/{category_id}",
    response_model=DataResponse[CategoryResponse],
    response_model_exclude_none=True,
)
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    handler: CategoryHandler = Depends(get_handler),
) -> DataResponse[CategoryResponse]:
    category = handler.update(category_id, payload)
    return DataResponse[CategoryResponse](
        message="Category updated successfully",
        data=CategoryResponse.model_validate(category),
    )
