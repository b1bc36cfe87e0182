from fastapi import APIRouter, Depends, HTTPException, Query, status

from salon_api.models import client as client_model  # noqa: F401
from salon_api.routes.appointment_routes import ensure_database_ready, raise_http_error
from salon_api.scheduling.clients import CLIENT_SUGGESTION_LIMIT, Client, find_client, suggest_clients
from salon_api.scheduling.errors import PersistenceError
from salon_api.storage.sql_gateway import SqlClientDirectory

router = APIRouter(tags=['clients'])


def get_client_directory() -> SqlClientDirectory:
    ensure_database_ready()
    return SqlClientDirectory()


def load_clients(directory: SqlClientDirectory) -> list[Client]:
    try:
        return directory.fetch_all()
    except PersistenceError as exc:
        raise_http_error(exc)


@router.get('/suggestions', response_model=list[Client])
def get_client_suggestions(
    query: str = Query(default='', alias='q'),
    limit: int = Query(default=CLIENT_SUGGESTION_LIMIT, ge=1, le=20),
    directory: SqlClientDirectory = Depends(get_client_directory),
):
    if not query.strip():
        return []
    return suggest_clients(load_clients(directory), query, limit)


@router.get('/match', response_model=Client)
def get_client_match(
    name: str = Query(...),
    directory: SqlClientDirectory = Depends(get_client_directory),
):
    client = find_client(load_clients(directory), name)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Client not found.',
        )
    return client
