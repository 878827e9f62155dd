from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.api.dependencies import get_current_principal, get_query_service, get_workflow, require_admin
from app.api.errors import to_http_exception
from app.core.exceptions import AuthorizationError, StockDeskError
from app.core.logger import logger
from app.core.security import Principal
from app.schemas.transactions import (
    RejectRequest,
    TransactionCreate,
    TransactionList,
    TransactionOut,
    TransactionResult,
)
from app.services.transaction_query import TransactionFilter, TransactionQueryService
from app.services.transaction_workflow import TransactionWorkflow

router = APIRouter()


def _result(message, record) -> TransactionResult:
    return TransactionResult(message=message, transaction=TransactionOut.model_validate(record))


def _listing(records) -> TransactionList:
    return TransactionList(
        count=len(records),
        transactions=[TransactionOut.model_validate(r) for r in records],
    )


@router.post("/", response_model=TransactionResult, status_code=status.HTTP_201_CREATED)
def submit_transaction(
        payload: TransactionCreate,
        principal: Principal = Depends(get_current_principal),
        workflow: TransactionWorkflow = Depends(get_workflow),
):
    """Submit a buy or sell request; it stays pending until an admin decides it."""
    try:
        record = workflow.submit(owner_id=principal.user_id, **payload.model_dump())
        return _result("Transaction request submitted for approval", record)
    except StockDeskError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"submit_transaction failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to create transaction")


@router.get("/user/{user_id}", response_model=TransactionList)
def list_user_transactions(
        user_id: str,
        limit: Optional[int] = Query(default=None),
        offset: Optional[int] = Query(default=None),
        principal: Principal = Depends(get_current_principal),
        queries: TransactionQueryService = Depends(get_query_service),
):
    """All of one user's transactions, newest first. Visible to that user and to admins."""
    try:
        if user_id != principal.user_id and not principal.is_admin:
            raise AuthorizationError("Access denied. You can only view your own transactions.")
        return _listing(queries.list_for_owner(user_id, limit=limit, offset=offset))
    except StockDeskError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"list_user_transactions failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to fetch transactions")


@router.get("/", response_model=TransactionList)
def list_transactions(
        status_: Optional[str] = Query(default=None, alias="status", description="pending/approved/rejected"),
        owner_id: Optional[str] = None,
        limit: Optional[int] = Query(default=None),
        offset: Optional[int] = Query(default=None),
        principal: Principal = Depends(require_admin),
        queries: TransactionQueryService = Depends(get_query_service),
):
    """Admin view over every user's transactions, optionally filtered by status and owner."""
    try:
        records = queries.list_all(
            TransactionFilter(status=status_, owner_id=owner_id),
            limit=limit,
            offset=offset,
            include_owner_info=True,
        )
        return _listing(records)
    except StockDeskError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"list_transactions failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to fetch transactions")


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(
        transaction_id: str,
        principal: Principal = Depends(get_current_principal),
        workflow: TransactionWorkflow = Depends(get_workflow),
):
    """One transaction, visible to its owner and to admins."""
    try:
        record = workflow.get(transaction_id)
        if record.owner_id != principal.user_id and not principal.is_admin:
            raise AuthorizationError("Access denied. You can only view your own transactions.")
        return TransactionOut.model_validate(record)
    except StockDeskError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"get_transaction failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to fetch transaction")


@router.put("/{transaction_id}/approve", response_model=TransactionResult)
def approve_transaction(
        transaction_id: str,
        principal: Principal = Depends(require_admin),
        workflow: TransactionWorkflow = Depends(get_workflow),
):
    """Approve a pending transaction. Fails with 409 once it has been decided."""
    try:
        record = workflow.approve(transaction_id, principal.user_id)
        return _result("Transaction approved successfully", record)
    except StockDeskError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"approve_transaction failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to approve transaction")


@router.put("/{transaction_id}/reject", response_model=TransactionResult)
def reject_transaction(
        transaction_id: str,
        payload: RejectRequest,
        principal: Principal = Depends(require_admin),
        workflow: TransactionWorkflow = Depends(get_workflow),
):
    """Reject a pending transaction; the body must carry a non-blank reason."""
    try:
        record = workflow.reject(transaction_id, principal.user_id, payload.reason)
        return _result("Transaction rejected successfully", record)
    except StockDeskError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"reject_transaction failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to reject transaction")
