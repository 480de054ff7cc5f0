"""
Client Service - CRUD for clients
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from pump_estimator_core.infra.models import ClientModel, utcnow

from api.models.client_schemas import ClientIn, ClientUpdate
from api.services.errors import NotFoundError, commit

logger = logging.getLogger(__name__)


def list_clients(session: Session, search: Optional[str] = None) -> List[ClientModel]:
    query = select(ClientModel).order_by(ClientModel.name)
    if search:
        query = query.where(ClientModel.name.ilike(f"%{search}%"))
    return list(session.scalars(query).all())


def get_client(session: Session, client_id: UUID) -> ClientModel:
    client = session.get(ClientModel, client_id)
    if client is None:
        raise NotFoundError("Client", client_id)
    return client


def create_client(session: Session, data: ClientIn) -> ClientModel:
    client = ClientModel(**data.model_dump())
    session.add(client)
    commit(session, "create client")
    logger.info(f"Created client {client.id} ({client.name})")
    return client


def update_client(session: Session, client_id: UUID, data: ClientUpdate) -> ClientModel:
    client = get_client(session, client_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(client, field, value)
    client.updated_at = utcnow()
    commit(session, "update client")
    return client


def delete_client(session: Session, client_id: UUID) -> None:
    """Deletes the client together with its sites and estimates"""
    client = get_client(session, client_id)
    session.delete(client)
    commit(session, "delete client")
    logger.info(f"Deleted client {client_id}")
