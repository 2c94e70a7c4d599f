import logging
import threading

from accounts_api.services.notification_dispatcher import NotificationDispatcher


def test_dispatch_runs_in_background(notifier):
    ran = threading.Event()

    notifier.dispatch(ran.set)
    notifier.drain(timeout=5)

    assert ran.is_set()


def test_failures_are_logged_not_raised(caplog):
    dispatcher = NotificationDispatcher(max_workers=1)

    def explode():
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="accounts_api.services.notification_dispatcher"):
        future = dispatcher.dispatch(explode)
        dispatcher.shutdown()

    assert isinstance(future.exception(), RuntimeError)
    assert any("boom" in record.getMessage() for record in caplog.records)


def test_dispatch_after_shutdown_is_dropped():
    dispatcher = NotificationDispatcher(max_workers=1)
    dispatcher.shutdown()

    assert dispatcher.dispatch(lambda: None) is None


def test_dispatch_to_stopped_executor_is_logged_not_raised(caplog):
    dispatcher = NotificationDispatcher(max_workers=1)
    # The pool stops underneath the dispatcher, as it does during interpreter shutdown.
    dispatcher._executor.shutdown(wait=True)

    with caplog.at_level(logging.WARNING, logger="accounts_api.services.notification_dispatcher"):
        assert dispatcher.dispatch(lambda: None) is None

    assert any("Could not schedule" in record.getMessage() for record in caplog.records)
    dispatcher.shutdown()


def test_concurrent_dispatch_and_shutdown_never_raise():
    dispatcher = NotificationDispatcher(max_workers=2)
    errors = []

    def spam():
        try:
            for _ in range(200):
                dispatcher.dispatch(lambda: None)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=spam) for _ in range(4)]
    for thread in threads:
        thread.start()
    dispatcher.shutdown()
    for thread in threads:
        thread.join(timeout=10)

    assert errors == []
