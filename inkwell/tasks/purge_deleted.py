# inkwell/tasks/purge_deleted.py
from datetime import datetime

from inkwell.services.lifecycle_service import LifecycleService


def run_purge_job(app, now: datetime | None = None) -> int:
    """
    Süresi dolmuş soft-deleted kitapları kalıcı siler.
    Scheduler (günlük + açılış) ve `flask purge-books` buradan çağırır.
    """
    with app.app_context():
        try:
            purged = LifecycleService.purge_expired(now)
        except Exception as e:
            app.logger.exception(f"[purge] Hata: {e}")
            return 0
        return purged
