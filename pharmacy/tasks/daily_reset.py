# pharmacy/tasks/daily_reset.py
from pharmacy.celery_worker import celery_app
from pharmacy.data.database import SessionLocal
from pharmacy.repos.courier_repo import CourierRepo
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)


def reset_daily_counters(db) -> int:
    repo = CourierRepo(db)
    count = repo.reset_daily_counters()
    repo.commit()
    return count


@celery_app.task(name="pharmacy.tasks.daily_reset.reset_courier_daily_counters_task")
def reset_courier_daily_counters_task():
    logger.info("Reset daily courier counters task started")

    db = SessionLocal()
    try:
        count = reset_daily_counters(db)
        logger.info(f"Zresetowano dzienne liczniki {count} kurierow")
        return count
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
