"""
HTTP routes for the inventory API.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from inventory_api.auth import IdentityProvider
from inventory_api.config import Settings, get_settings
from inventory_api.db import REQUIRED_PRODUCT_COLUMNS, DbClient
from inventory_api.dependencies import (
    get_db_client,
    get_identity_provider,
    get_storage_client,
)
from inventory_api.errors import ApiError, delegate_call
from inventory_api.schemas import (
    Credentials,
    DataResponse,
    ErrorResponse,
    MessageResponse,
    ProductCreate,
    UploadUrlResponse,
)
from inventory_api.storage import StorageClient, upload_key

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)

INTERNAL_ERROR = "Erro interno do servidor"


def is_missing(value: Any) -> bool:
    """Falsy in the JSON sense: null, false, "" or a zero number.

    Empty lists and objects count as present.
    """
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and value == 0


@router.get("/products", response_model=DataResponse)
def list_products(db: DbClient = Depends(get_db_client)):
    with delegate_call("Erro ao buscar os produtos", INTERNAL_ERROR):
        rows = db.list_products()
    return DataResponse(message="Produtos encontrados com sucesso", data=rows)


@router.get("/supplier", response_model=DataResponse)
def list_suppliers(db: DbClient = Depends(get_db_client)):
    with delegate_call("Erro ao buscar os fornecedores", INTERNAL_ERROR):
        rows = db.list_suppliers()
    return DataResponse(message="Fornecedores encontrados com sucesso", data=rows)


@router.get("/categories", response_model=DataResponse)
def list_categories(db: DbClient = Depends(get_db_client)):
    with delegate_call("Erro ao buscar as categorias", INTERNAL_ERROR):
        rows = db.list_categories()
    return DataResponse(message="Categorias encontradas com sucesso", data=rows)


@router.post("/products", response_model=MessageResponse)
def create_product(
    payload: Optional[ProductCreate] = None,
    db: DbClient = Depends(get_db_client),
):
    """
    Insert a product. ``id``, ``name``, ``amount`` and ``price`` must all be
    present (see ``is_missing``); a zero amount or price is rejected too.
    """
    payload = payload or ProductCreate()
    if any(is_missing(getattr(payload, column)) for column in REQUIRED_PRODUCT_COLUMNS):
        raise ApiError(400, "Todos os campos são obrigatórios")

    row = payload.model_dump(exclude_unset=True)
    with delegate_call("Erro ao inserir o produto", "Erro interno ao cadastrar produto"):
        db.insert_product(row)
    return MessageResponse(message="Produto cadastrado com sucesso")


@router.patch("/products/{product_id}", response_model=MessageResponse)
def update_product(
    product_id: str,
    updates: Optional[dict[str, Any]] = Body(default=None),
    db: DbClient = Depends(get_db_client),
):
    if not updates:
        raise ApiError(400, "Nenhum campo para atualizar foi enviado")

    with delegate_call(
        "Erro ao atualizar o produto", "Erro interno ao atualizar produto"
    ):
        db.update_product(product_id, updates)
    return MessageResponse(message="Produto atualizado com sucesso")


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(product_id: str, db: DbClient = Depends(get_db_client)):
    with delegate_call("Erro ao excluir o produto", "Erro interno ao excluir produto"):
        db.delete_product(product_id)
    return MessageResponse(message="Produto excluído com sucesso")


@router.post(
    "/autenticacao",
    response_model=DataResponse,
    responses={401: {"model": ErrorResponse}},
)
def authenticate(
    credentials: Optional[Credentials] = None,
    identity: IdentityProvider = Depends(get_identity_provider),
):
    credentials = credentials or Credentials()
    if is_missing(credentials.email) or is_missing(credentials.password):
        raise ApiError(400, "Email e senha são obrigatórios")

    with delegate_call(
        "Credenciais inválidas", "Erro interno ao autenticar", delegate_status=401
    ):
        result = identity.sign_in_with_password(
            credentials.email, credentials.password
        )
    logger.info("Signed in %s", credentials.email)
    return DataResponse(message="Usuário autenticado com sucesso", data=result)


@router.get("/generate-upload-url", response_model=UploadUrlResponse)
def generate_upload_url(
    filename: Optional[str] = Query(None),
    content_type: Optional[str] = Query(None, alias="contentType"),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    if not filename or not content_type:
        raise ApiError(400, "Os parâmetros filename e contentType são obrigatórios")

    key = upload_key(filename)
    with delegate_call(
        "Erro ao gerar URL de upload", "Erro interno ao gerar URL de upload"
    ):
        signed_url = storage.presign_put(
            key, content_type, expires_in=settings.upload_url_expires_in
        )
    return UploadUrlResponse(
        signedUrl=signed_url, key=key, publicUrl=storage.public_url(key)
    )
