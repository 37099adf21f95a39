# storefront/services/product_admin_service.py
import uuid
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.mappers import (
    group_from_row,
    group_values,
    image_from_row,
    image_values,
    option_from_row,
    option_values,
    product_from_row,
)
from storefront.data.models.product import (
    ProductImageModel,
    ProductModel,
    VariationGroupModel,
    VariationOptionModel,
)
from storefront.domain.entities import Product, ProductImage, VariationGroup, VariationOption
from storefront.domain.errors import BackendError, NotFoundError
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class ProductAdminService:
    """
    Panel admina: produkty, obrazki, grupy i opcje wariantow.
    Kazda komenda to osobna transakcja, bledy bazy -> BackendError.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)

    def _write(self, action: str, fn, *args):
        try:
            return fn(*args)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad zapisu ({action}): {e}")
            raise BackendError(f"Erro ao salvar: {action}") from e

    def _product_row(self, product_id: str) -> ProductModel:
        row = self.repo.get_product(product_id)
        if not row:
            raise NotFoundError("Produto não encontrado")
        return row

    def _check_category(self, data: Dict[str, Any]) -> None:
        category_id = data.get("category_id")
        if category_id and not self.categories.get_category(category_id):
            raise ValueError("Categoria inválida")

    # =====================================================
    # PRODUKTY
    # =====================================================
    def list_products(self, category_id: str | None = None) -> List[Product]:
        return [product_from_row(r) for r in self.repo.list_products(category_id=category_id)]

    def get_product(self, product_id: str) -> Product:
        return product_from_row(self._product_row(product_id))

    def create_product(self, data: Dict[str, Any]) -> Product:
        """
        Tworzy produkt razem z opcjonalnymi obrazkami i grupami wariantow
        (tak jak formularz w panelu wysyla wszystko naraz).
        """
        data = dict(data)
        images = data.pop("images", None) or []
        groups = data.pop("variation_groups", None) or []
        self._check_category(data)

        row = ProductModel(id=_new_id(), **data)
        for position, image in enumerate(images):
            values = image_values({"position": position, **image})
            row.images.append(ProductImageModel(id=_new_id(), **values))
        if row.images and not any(i.is_main for i in row.images):
            row.images[0].is_main = True

        for position, group in enumerate(groups):
            group = dict(group)
            options = group.pop("options", None) or []
            group_row = VariationGroupModel(id=_new_id(), **group_values({"position": position, **group}))
            for opt_position, option in enumerate(options):
                values = option_values({"position": opt_position, **option})
                group_row.options.append(VariationOptionModel(id=_new_id(), **values))
            row.variation_groups.append(group_row)

        created = self._write("produto", self.repo.create_product, row)
        logger.info(f"Utworzono produkt {created.id} ({created.name})")
        return product_from_row(created)

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Product:
        row = self._product_row(product_id)
        self._check_category(data)
        updated = self._write("produto", self.repo.update_product, row, data)
        return product_from_row(updated)

    def toggle_active(self, product_id: str) -> Product:
        row = self._product_row(product_id)
        updated = self._write("produto", self.repo.update_product, row, {"active": not row.active})
        logger.info(f"Produkt {product_id} active={updated.active}")
        return product_from_row(updated)

    def delete_product(self, product_id: str) -> None:
        row = self._product_row(product_id)
        self._write("produto", self.repo.delete_product, row)
        logger.info(f"Usunieto produkt {product_id}")

    # =====================================================
    # OBRAZKI
    # =====================================================
    def _image_row(self, product_id: str, image_id: str) -> ProductImageModel:
        image = self.repo.get_image(image_id)
        if not image or image.product_id != product_id:
            raise NotFoundError("Imagem não encontrada")
        return image

    def add_image(self, product_id: str, data: Dict[str, Any]) -> ProductImage:
        product = self._product_row(product_id)
        data = dict(data)
        data.setdefault("position", len(product.images))
        # pierwszy obrazek zawsze glowny
        make_main = data.pop("is_main", False) or not product.images

        image = ProductImageModel(id=_new_id(), product_id=product_id, **image_values(data))
        created = self._write("imagem", self.repo.add_image, image)
        if make_main:
            self._write("imagem", self.repo.set_main_image, product_id, created.id)
        return image_from_row(self._image_row(product_id, created.id))

    def update_image(self, product_id: str, image_id: str, data: Dict[str, Any]) -> ProductImage:
        image = self._image_row(product_id, image_id)
        data = dict(data)
        make_main = data.pop("is_main", None)
        updated = self._write("imagem", self.repo.update_image, image, image_values(data))
        if make_main:
            self._write("imagem", self.repo.set_main_image, product_id, image_id)
        return image_from_row(updated)

    def remove_image(self, product_id: str, image_id: str) -> None:
        image = self._image_row(product_id, image_id)
        was_main = image.is_main
        self._write("imagem", self.repo.delete_image, image)

        # usunieto glowny -> glownym zostaje pierwszy z pozostalych
        remaining = self._product_row(product_id).images
        if was_main and remaining:
            self._write("imagem", self.repo.set_main_image, product_id, remaining[0].id)

    def set_main_image(self, product_id: str, image_id: str) -> Product:
        self._image_row(product_id, image_id)
        self._write("imagem", self.repo.set_main_image, product_id, image_id)
        return self.get_product(product_id)

    def reorder_images(self, product_id: str, ordered_ids: List[str]) -> Product:
        for image_id in ordered_ids:
            self._image_row(product_id, image_id)
        self._write("imagem", self.repo.set_image_positions, product_id, ordered_ids)
        return self.get_product(product_id)

    # =====================================================
    # GRUPY I OPCJE WARIANTOW
    # =====================================================
    def _group_row(self, product_id: str, group_id: str) -> VariationGroupModel:
        group = self.repo.get_group(group_id)
        if not group or group.product_id != product_id:
            raise NotFoundError("Grupo de variação não encontrado")
        return group

    def _option_row(self, group: VariationGroupModel, option_id: str) -> VariationOptionModel:
        option = self.repo.get_option(option_id)
        if not option or option.group_id != group.id:
            raise NotFoundError("Opção não encontrada")
        return option

    def add_group(self, product_id: str, data: Dict[str, Any]) -> VariationGroup:
        product = self._product_row(product_id)
        data = dict(data)
        options = data.pop("options", None) or []
        data.setdefault("position", len(product.variation_groups))

        group = VariationGroupModel(id=_new_id(), product_id=product_id, **group_values(data))
        for position, option in enumerate(options):
            group.options.append(
                VariationOptionModel(id=_new_id(), **option_values({"position": position, **option}))
            )
        created = self._write("grupo", self.repo.add_group, group)
        return group_from_row(created)

    def update_group(self, product_id: str, group_id: str, data: Dict[str, Any]) -> VariationGroup:
        group = self._group_row(product_id, group_id)
        updated = self._write("grupo", self.repo.update_group, group, group_values(data))
        return group_from_row(updated)

    def remove_group(self, product_id: str, group_id: str) -> None:
        group = self._group_row(product_id, group_id)
        self._write("grupo", self.repo.delete_group, group)

    def add_option(self, product_id: str, group_id: str, data: Dict[str, Any]) -> VariationOption:
        group = self._group_row(product_id, group_id)
        data = dict(data)
        data.setdefault("position", len(group.options))
        option = VariationOptionModel(id=_new_id(), group_id=group.id, **option_values(data))
        created = self._write("opção", self.repo.add_option, option)
        return option_from_row(created)

    def update_option(
        self, product_id: str, group_id: str, option_id: str, data: Dict[str, Any]
    ) -> VariationOption:
        group = self._group_row(product_id, group_id)
        option = self._option_row(group, option_id)
        updated = self._write("opção", self.repo.update_option, option, option_values(data))
        return option_from_row(updated)

    def remove_option(self, product_id: str, group_id: str, option_id: str) -> None:
        group = self._group_row(product_id, group_id)
        option = self._option_row(group, option_id)
        self._write("opção", self.repo.delete_option, option)
