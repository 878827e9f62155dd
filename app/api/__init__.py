from fastapi import APIRouter

from .routes.transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(transactions_router, prefix="/transactions", tags=["Transactions"])


@api_router.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
