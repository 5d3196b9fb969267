# inkwell/tasks/scheduler.py
from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from inkwell.tasks.purge_deleted import run_purge_job


def start_scheduler(app):
    """
    - Her gün PURGE_CRON_HOUR:PURGE_CRON_MINUTE (UTC) purge çalışır.
    - PURGE_ON_STARTUP açıksa açılışta bir kez çalışır.
    - Debug reloader'da çift çalışmayı engeller.
    """
    if not app.config.get("SCHEDULER_ENABLED", True):
        app.logger.info("[scheduler] Disabled by config.")
        return None

    # Werkzeug reloader varsa WERKZEUG_RUN_MAIN=true olan process gerçek process'tir.
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    scheduler = BackgroundScheduler(timezone="UTC")

    def _job_wrapper():
        run_purge_job(app)

    scheduler.add_job(
        func=_job_wrapper,
        trigger=CronTrigger(
            hour=app.config.get("PURGE_CRON_HOUR", 0),
            minute=app.config.get("PURGE_CRON_MINUTE", 0),
            timezone="UTC",
        ),
        id="purge_deleted_books",
        replace_existing=True,
        max_instances=1,        # aynı job üst üste binmesin
        coalesce=True,          # kaçırılanları tek seferde toparla
        misfire_grace_time=3600,
    )

    if app.config.get("PURGE_ON_STARTUP", True):
        # trigger yok -> hemen bir kez
        scheduler.add_job(
            func=_job_wrapper,
            id="purge_deleted_books_startup",
            replace_existing=True,
        )

    scheduler.start()
    app.logger.info("[scheduler] Purge job scheduled (daily).")

    # process kapanınca scheduler dursun
    atexit.register(lambda: scheduler.shutdown(wait=False) if scheduler.running else None)

    app.extensions["apscheduler"] = scheduler
    return scheduler
