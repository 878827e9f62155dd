from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.core.db import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import Principal, decode_access_token
from app.repositories.factory import RepositoryFactory
from app.services.transaction_query import TransactionQueryService
from app.services.transaction_workflow import TransactionWorkflow


def get_factory(db: Session = Depends(get_db)) -> RepositoryFactory:
    return RepositoryFactory(db)


def get_workflow(factory: RepositoryFactory = Depends(get_factory)) -> TransactionWorkflow:
    return TransactionWorkflow(factory)


def get_query_service(factory: RepositoryFactory = Depends(get_factory)) -> TransactionQueryService:
    return TransactionQueryService(factory)


def get_current_principal(authorization: Optional[str] = Header(default=None)) -> Principal:
    """Resolve the bearer token into (user id, role)."""
    try:
        if not authorization or not authorization.startswith("Bearer "):
            raise AuthenticationError("No token provided. Authentication required.")
        return decode_access_token(authorization[len("Bearer "):].strip())
    except AuthenticationError as e:
        raise to_http_exception(e) from e


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise to_http_exception(AuthorizationError("Access denied. Admin only."))
    return principal
