"""Clients Router - client management"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from pump_estimator_core.infra.db import get_session

from api.models.client_schemas import ClientIn, ClientOut, ClientUpdate
from api.services import client_service
from api.services.errors import ServiceError
from api.utils.errors import get_trace_id, to_http_exception

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/clients", tags=["clients"])


@router.get("", response_model=List[ClientOut])
def list_clients(q: Optional[str] = None, session: Session = Depends(get_session)):
    """List clients, optionally filtered by name"""
    return client_service.list_clients(session, search=q)


@router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(req: ClientIn, request: Request, session: Session = Depends(get_session)):
    try:
        return client_service.create_client(session, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.get("/{client_id}", response_model=ClientOut)
def get_client(client_id: UUID, request: Request, session: Session = Depends(get_session)):
    try:
        return client_service.get_client(session, client_id)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.put("/{client_id}", response_model=ClientOut)
def update_client(
    client_id: UUID, req: ClientUpdate, request: Request, session: Session = Depends(get_session)
):
    try:
        return client_service.update_client(session, client_id, req)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: UUID, request: Request, session: Session = Depends(get_session)):
    """Delete client with its sites and estimates"""
    try:
        client_service.delete_client(session, client_id)
    except ServiceError as e:
        raise to_http_exception(e, get_trace_id(request)) from e
