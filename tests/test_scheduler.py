import datetime

import click

from inkwell import create_app
from inkwell.extensions import db
from inkwell.models.book import Book
from inkwell.services.lifecycle_service import LifecycleService
from inkwell.tasks.purge_deleted import run_purge_job
from inkwell.tasks.scheduler import start_scheduler
from tests.conftest import NOW, TEST_CONFIG, make_book


def test_scheduler_disabled_by_config(app):
    assert start_scheduler(app) is None


def test_scheduler_registers_daily_and_startup_jobs(app, mocker):
    scheduler_cls = mocker.patch("inkwell.tasks.scheduler.BackgroundScheduler")
    mocker.patch("inkwell.tasks.scheduler.atexit.register")
    app.config.update(SCHEDULER_ENABLED=True, PURGE_ON_STARTUP=True)

    scheduler = start_scheduler(app)

    assert scheduler is scheduler_cls.return_value
    job_ids = [c.kwargs["id"] for c in scheduler.add_job.call_args_list]
    assert job_ids == ["purge_deleted_books", "purge_deleted_books_startup"]
    daily = scheduler.add_job.call_args_list[0].kwargs
    assert daily["max_instances"] == 1
    assert daily["coalesce"] is True
    scheduler.start.assert_called_once()
    assert app.extensions["apscheduler"] is scheduler


def test_scheduler_without_startup_run(app, mocker):
    scheduler_cls = mocker.patch("inkwell.tasks.scheduler.BackgroundScheduler")
    mocker.patch("inkwell.tasks.scheduler.atexit.register")
    app.config.update(SCHEDULER_ENABLED=True, PURGE_ON_STARTUP=False)

    start_scheduler(app)
    assert scheduler_cls.return_value.add_job.call_count == 1


def test_create_app_starts_scheduler_when_enabled(mocker):
    started = mocker.patch("inkwell.tasks.scheduler.start_scheduler")
    app = create_app({**TEST_CONFIG, "SCHEDULER_ENABLED": True})
    started.assert_called_once_with(app)


def test_cli_commands_do_not_start_scheduler(mocker):
    started = mocker.patch("inkwell.tasks.scheduler.start_scheduler")
    with click.Context(click.Command("purge-books")):
        create_app({**TEST_CONFIG, "SCHEDULER_ENABLED": True})
    started.assert_not_called()


def test_run_command_starts_scheduler(mocker):
    started = mocker.patch("inkwell.tasks.scheduler.start_scheduler")
    with click.Context(click.Command("run")):
        app = create_app({**TEST_CONFIG, "SCHEDULER_ENABLED": True})
    started.assert_called_once_with(app)


def test_run_purge_job_uses_given_time(app, user):
    book = make_book(user.id)
    LifecycleService.soft_delete(book.id, user.id, now=NOW)
    book_id = book.id

    assert run_purge_job(app, now=NOW + datetime.timedelta(days=9)) == 0
    assert run_purge_job(app, now=NOW + datetime.timedelta(days=11)) == 1
    db.session.expire_all()
    assert db.session.query(Book).filter_by(id=book_id).count() == 0


def test_run_purge_job_logs_and_swallows_unexpected_errors(app, mocker):
    mocker.patch.object(LifecycleService, "purge_expired", side_effect=RuntimeError("boom"))
    log = mocker.patch.object(app.logger, "exception")
    assert run_purge_job(app, now=NOW) == 0
    log.assert_called_once()


def test_purge_cli_command(app, user):
    book = make_book(user.id)
    # gerçek saat: 10 günden eski silinmiş kayıt
    LifecycleService.soft_delete(book.id, user.id, now=NOW - datetime.timedelta(days=365 * 5))

    result = app.test_cli_runner().invoke(args=["purge-books"])
    assert result.exit_code == 0
    assert "Purged 1 books" in result.output
