from stockfeed.clients import build_provider
from stockfeed.core.celery_app import celery
from stockfeed.core.db import create_db_engine, make_session_factory
from stockfeed.core.logger import logger
from stockfeed.repositories import RepositoryFactory
from stockfeed.services.latest_prices import get_latest_prices


@celery.task(name="stockfeed.tasks.refresh.refresh_latest_prices_task")
def refresh_latest_prices_task():
    logger.info("Starting scheduled latest price refresh.")

    engine = create_db_engine()
    db = make_session_factory(engine)()

    try:
        rows = get_latest_prices(RepositoryFactory(db), build_provider(), refresh=True)
        logger.info(f"Latest price refresh complete, {len(rows)} symbols.")
        return len(rows)
    except Exception as e:
        logger.error(f"Latest price refresh failed: {e}", exc_info=True)
        raise
    finally:
        db.close()
        engine.dispose()
