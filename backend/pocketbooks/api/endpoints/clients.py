"""Client API"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.client import Client
from pocketbooks.models.sale import Sale
from pocketbooks.schemas.client import ClientCreate, ClientResponse, ClientUpdate
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.services import crud
from pocketbooks.services.crud import ListParams

logger = get_logger(__name__)
router = APIRouter()

SEARCH_FIELDS = ("name", "email", "contact_person")


@router.get("", response_model=PaginatedResponse[ClientResponse])
async def list_clients(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
) -> Any:
    clients, pagination = await crud.get_all(db, Client, params, SEARCH_FIELDS)
    return PaginatedResponse[ClientResponse](
        data=[ClientResponse.model_validate(c) for c in clients],
        pagination=pagination,
    )


@router.get("/{client_id}", response_model=ApiResponse[ClientResponse])
async def get_client(
    *,
    db: AsyncSession = Depends(get_db),
    client_id: int,
) -> Any:
    client = await crud.get_by_id(db, Client, client_id)
    return ApiResponse[ClientResponse](data=ClientResponse.model_validate(client))


@router.post("", response_model=ApiResponse[ClientResponse], status_code=201)
async def create_client(
    *,
    db: AsyncSession = Depends(get_db),
    client_in: ClientCreate,
) -> Any:
    client = await crud.create(db, Client, client_in.model_dump(), unique_field="email")
    await db.commit()
    logger.info(f"Created client {client.id}: {client.name}")
    return ApiResponse[ClientResponse](
        data=ClientResponse.model_validate(client),
        message="Client created successfully",
    )


@router.put("/{client_id}", response_model=ApiResponse[ClientResponse])
async def update_client(
    *,
    db: AsyncSession = Depends(get_db),
    client_id: int,
    client_in: ClientUpdate,
) -> Any:
    client = await crud.update(
        db, Client, client_id, client_in.model_dump(exclude_unset=True), unique_field="email"
    )
    await db.commit()
    return ApiResponse[ClientResponse](
        data=ClientResponse.model_validate(client),
        message="Client updated successfully",
    )


@router.delete("/{client_id}", response_model=ApiResponse)
async def delete_client(
    *,
    db: AsyncSession = Depends(get_db),
    client_id: int,
) -> Any:
    await crud.get_by_id(db, Client, client_id)
    sales = await crud.count_where(db, Sale, Sale.client_id == client_id)
    if sales:
        raise HTTPException(status_code=400, detail=f"Cannot delete client with {sales} sale(s)")
    await crud.delete(db, Client, client_id)
    await db.commit()
    logger.info(f"Deleted client {client_id}")
    return ApiResponse(message="Client deleted successfully")
