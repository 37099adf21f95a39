# storefront/api/routers/admin_catalog.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.entities import Category, Product, ProductImage, VariationGroup, VariationOption
from storefront.domain.errors import BackendError, NotFoundError
from storefront.domain.schemas import (
    CategoryIn,
    CategoryUpdate,
    GroupIn,
    GroupUpdate,
    ImageIn,
    ImageUpdate,
    OptionIn,
    OptionUpdate,
    ProductIn,
    ProductUpdate,
    ReorderIn,
)
from storefront.services.category_service import CategoryService
from storefront.services.product_admin_service import ProductAdminService

router = APIRouter(prefix="/admin", tags=["admin-catalog"], dependencies=[Depends(require_admin)])


def _run(fn, *args):
    try:
        return fn(*args)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


# =====================================================
# KATEGORIE
# =====================================================
@router.get("/categories", response_model=List[Category])
def list_categories(db: Session = Depends(get_db)):
    return CategoryService(db).list_categories()


@router.post("/categories", response_model=Category, status_code=201)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    return _run(CategoryService(db).create_category, payload.model_dump())


@router.put("/categories/order", response_model=List[Category])
def reorder_categories(payload: ReorderIn, db: Session = Depends(get_db)):
    return _run(CategoryService(db).reorder, payload.ids)


@router.patch("/categories/{category_id}", response_model=Category)
def update_category(category_id: str, payload: CategoryUpdate, db: Session = Depends(get_db)):
    return _run(CategoryService(db).update_category, category_id, payload.model_dump(exclude_unset=True))


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(category_id: str, db: Session = Depends(get_db)):
    _run(CategoryService(db).delete_category, category_id)


# =====================================================
# PRODUKTY
# =====================================================
@router.get("/products", response_model=List[Product])
def list_products(category_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return ProductAdminService(db).list_products(category_id)


@router.post("/products", response_model=Product, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    return _run(ProductAdminService(db).create_product, payload.model_dump(exclude_none=True))


@router.get("/products/{product_id}", response_model=Product)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return _run(ProductAdminService(db).get_product, product_id)


@router.patch("/products/{product_id}", response_model=Product)
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    return _run(ProductAdminService(db).update_product, product_id, payload.model_dump(exclude_unset=True))


@router.post("/products/{product_id}/toggle", response_model=Product)
def toggle_product(product_id: str, db: Session = Depends(get_db)):
    return _run(ProductAdminService(db).toggle_active, product_id)


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    _run(ProductAdminService(db).delete_product, product_id)


# =====================================================
# OBRAZKI
# =====================================================
@router.post("/products/{product_id}/images", response_model=ProductImage, status_code=201)
def add_image(product_id: str, payload: ImageIn, db: Session = Depends(get_db)):
    return _run(ProductAdminService(db).add_image, product_id, payload.model_dump(exclude_none=True))


@router.put("/products/{product_id}/images/order", response_model=Product)
def reorder_images(product_id: str, payload: ReorderIn, db: Session = Depends(get_db)):
    return _run(ProductAdminService(db).reorder_images, product_id, payload.ids)


@router.patch("/products/{product_id}/images/{image_id}", response_model=ProductImage)
def update_image(product_id: str, image_id: str, payload: ImageUpdate, db: Session = Depends(get_db)):
    return _run(
        ProductAdminService(db).update_image, product_id, image_id, payload.model_dump(exclude_unset=True)
    )


@router.post("/products/{product_id}/images/{image_id}/main", response_model=Product)
def set_main_image(product_id: str, image_id: str, db: Session = Depends(get_db)):
    return _run(ProductAdminService(db).set_main_image, product_id, image_id)


@router.delete("/products/{product_id}/images/{image_id}", status_code=204)
def remove_image(product_id: str, image_id: str, db: Session = Depends(get_db)):
    _run(ProductAdminService(db).remove_image, product_id, image_id)


# =====================================================
# WARIANTY
# =====================================================
@router.post("/products/{product_id}/groups", response_model=VariationGroup, status_code=201)
def add_group(product_id: str, payload: GroupIn, db: Session = Depends(get_db)):
    return _run(ProductAdminService(db).add_group, product_id, payload.model_dump(exclude_none=True))


@router.patch("/products/{product_id}/groups/{group_id}", response_model=VariationGroup)
def update_group(product_id: str, group_id: str, payload: GroupUpdate, db: Session = Depends(get_db)):
    return _run(
        ProductAdminService(db).update_group, product_id, group_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/products/{product_id}/groups/{group_id}", status_code=204)
def remove_group(product_id: str, group_id: str, db: Session = Depends(get_db)):
    _run(ProductAdminService(db).remove_group, product_id, group_id)


@router.post("/products/{product_id}/groups/{group_id}/options", response_model=VariationOption, status_code=201)
def add_option(product_id: str, group_id: str, payload: OptionIn, db: Session = Depends(get_db)):
    return _run(
        ProductAdminService(db).add_option, product_id, group_id, payload.model_dump(exclude_none=True)
    )


@router.patch("/products/{product_id}/groups/{group_id}/options/{option_id}", response_model=VariationOption)
def update_option(
    product_id: str, group_id: str, option_id: str, payload: OptionUpdate, db: Session = Depends(get_db)
):
    return _run(
        ProductAdminService(db).update_option,
        product_id,
        group_id,
        option_id,
        payload.model_dump(exclude_unset=True),
    )


@router.delete("/products/{product_id}/groups/{group_id}/options/{option_id}", status_code=204)
def remove_option(product_id: str, group_id: str, option_id: str, db: Session = Depends(get_db)):
    _run(ProductAdminService(db).remove_option, product_id, group_id, option_id)
