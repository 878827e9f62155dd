from celery.signals import worker_ready

from app.core.celery_app import celery
from app.core.logger import logger
from app.core.db import SessionLocal
from app.repositories import RepositoryFactory
from app.services.quote_service import QuoteService
from app.services.watchlist_service import WatchlistService


def refresh_watchlist_quotes(db, quote_service=None) -> int:
    """
    Warm the quote cache for every symbol on any user's watchlist.
    """
    symbols = WatchlistService(RepositoryFactory(db)).tracked_symbols()
    if not symbols:
        logger.info("No watchlisted symbols to refresh.")
        return 0

    refreshed = (quote_service or QuoteService()).refresh(symbols)
    logger.info(f"Refreshed quotes for {len(refreshed)}/{len(symbols)} symbols")
    return len(refreshed)


@celery.task(name="app.tasks.refresh.refresh_watchlist_quotes_task")
def refresh_watchlist_quotes_task():
    logger.info("Starting scheduled quote refresh.")

    db = SessionLocal()

    try:
        return refresh_watchlist_quotes(db)
    except Exception as e:
        logger.error(f"Quote refresh failed: {e}", exc_info=True)
        raise
    finally:
        db.close()


@worker_ready.connect
def refresh_on_worker_start(sender, **kwargs):
    logger.info("Celery worker ready - queueing watchlist quote refresh.")
    refresh_watchlist_quotes_task.delay()
