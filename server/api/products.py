# server/api/products.py

import logging
from fastapi import APIRouter, Depends, status

from api.deps import get_current_user, get_product_store, read_payload
from core.errors import InfrastructureError, NotFoundError, ValidationError
from core.store import DocumentStore, StoreError, is_valid_id
from core.tokens import Claims
from core.validation import validate_product, validate_product_patch


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products")


def check_product_id(product_id: str):
    if not is_valid_id(product_id):
        raise ValidationError("Invalid Product ID format.")


def product_not_found() -> NotFoundError:
    return NotFoundError("Product not found.")


# -------------------------------
# Write Endpoints (token required)
# -------------------------------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    current_user: Claims = Depends(get_current_user),
    payload: dict = Depends(read_payload),
    products: DocumentStore = Depends(get_product_store),
):
    fields = validate_product(payload)
    try:
        product = products.insert(fields)
    except StoreError as e:
        raise InfrastructureError("Server error while creating product", detail=str(e))

    logger.info(f"Product {product['_id']} created by {current_user.username}")
    return {"message": "Product created successfully!", "product": product}


@router.patch("/{product_id}")
def update_product(
    product_id: str,
    current_user: Claims = Depends(get_current_user),
    payload: dict = Depends(read_payload),
    products: DocumentStore = Depends(get_product_store),
):
    """
    Merges the given fields into the stored product and re-validates
    the whole document before saving.
    """
    check_product_id(product_id)
    try:
        existing = products.find_by_id(product_id)
        if existing is None:
            raise product_not_found()

        fields = validate_product_patch(existing, payload)
        product = products.update_by_id(product_id, fields)
        if product is None:
            raise product_not_found()
    except StoreError as e:
        raise InfrastructureError("Server error while updating product", detail=str(e))

    logger.info(f"Product {product_id} updated by {current_user.username}")
    return {"message": "Product updated successfully!", "product": product}


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    products: DocumentStore = Depends(get_product_store),
    current_user: Claims = Depends(get_current_user),
):
    check_product_id(product_id)
    try:
        product = products.delete_by_id(product_id)
    except StoreError as e:
        raise InfrastructureError("Server error while deleting product", detail=str(e))
    if product is None:
        raise product_not_found()

    logger.info(f"Product {product_id} deleted by {current_user.username}")
    return {"message": "Product deleted successfully!", "product": product}


# -------------------------------
# Read Endpoints (open)
# -------------------------------

@router.get("")
def list_products(products: DocumentStore = Depends(get_product_store)):
    try:
        return products.find_all()
    except StoreError as e:
        raise InfrastructureError("Server error while fetching products", detail=str(e))


@router.get("/{product_id}")
def get_product(product_id: str, products: DocumentStore = Depends(get_product_store)):
    check_product_id(product_id)
    try:
        product = products.find_by_id(product_id)
    except StoreError as e:
        raise InfrastructureError("Server error while fetching product", detail=str(e))
    if product is None:
        raise product_not_found()
    return product
