"""
SubCategory API routes.

  POST /api/subcategories/{categoryId}           → create under a category
  GET  /api/subcategories                        → all sub-categories
  GET  /api/subcategories/search?name=           → first name match
  GET  /api/subcategories/category/{categoryId}  → sub-categories of a category
  GET  /api/subcategories/{id}                   → one sub-category
  PUT  /api/subcategories/{id}                   → partial update
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.catalog import (
    SubCategoryCreate,
    SubCategoryResponse,
    SubCategoryUpdate,
)
from app.schemas.common import DataResponse, ListResponse
from app.services.catalog.repository import CatalogRepository
from app.services.catalog.sub_categories import SubCategoryHandler
from app.settings import settings

router = APIRouter(
    prefix=f"{settings.api_prefix}/subcategories", tags=["subcategories"]
)


def get_handler(db: Session = Depends(get_db)) -> SubCategoryHandler:
    return SubCategoryHandler(CatalogRepository(db))


def _view(sub_category) -> SubCategoryResponse:
    return SubCategoryResponse.model_validate(sub_category)


@router.get(
    "",
    response_model=ListResponse[SubCategoryResponse],
    response_model_exclude_none=True,
)
def list_sub_categories(
    handler: SubCategoryHandler = Depends(get_handler),
) -> ListResponse[SubCategoryResponse]:
    sub_categories = handler.list_all()
    return ListResponse[SubCategoryResponse](
        count=len(sub_categories), data=[_view(s) for s in sub_categories]
    )


@router.get(
    "/search",
    response_model=DataResponse[SubCategoryResponse],
    response_model_exclude_none=True,
)
def search_sub_category(
    name: Optional[str] = None,
    handler: SubCategoryHandler = Depends(get_handler),
) -> DataResponse[SubCategoryResponse]:
    return DataResponse[SubCategoryResponse](data=_view(handler.search(name)))


@router.get(
    "/category/{category_id}",
    response_model=ListResponse[SubCategoryResponse],
    response_model_exclude_none=True,
)
def list_sub_categories_for_category(
    category_id: str,
    handler: SubCategoryHandler = Depends(get_handler),
) -> ListResponse[SubCategoryResponse]:
    category, sub_categories = handler.list_for_category(category_id)
    return ListResponse[SubCategoryResponse](
        count=len(sub_categories),
        data=[_view(s) for s in sub_categories],
        category=category.name,
    )


@router.post(
    "/{category_id}",
    response_model=DataResponse[SubCategoryResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_sub_category(
    category_id: str,
    payload: SubCategoryCreate,
    handler: SubCategoryHandler = Depends(get_handler),
) -> DataResponse[SubCategoryResponse]:
    sub_category = handler.create(category_id, payload)
    return DataResponse[SubCategoryResponse](
        message="Subcategory created successfully", data=_view(sub_category)
    )


@router.get(
    "/{sub_category_id}",
    response_model=DataResponse[SubCategoryResponse],
    response_model_exclude_none=True,
)
def get_sub_category(
    sub_category_id: str,
    handler: SubCategoryHandler = Depends(get_handler),
) -> DataResponse[SubCategoryResponse]:
    return DataResponse[SubCategoryResponse](data=_view(handler.get(sub_category_id)))


@router.put(
    "/{sub_category_id}",
    response_model=DataResponse[SubCategoryResponse],
    response_model_exclude_none=True,
)
def update_sub_category(
    sub_category_id: str,
    payload: SubCategoryUpdate,
    handler: SubCategoryHandler = Depends(get_handler),
) -> DataResponse[SubCategoryResponse]:
    sub_category = handler.update(sub_category_id, payload)
    return DataResponse[SubCategoryResponse](
        message="Subcategory updated successfully", data=_view(sub_category)
    )
