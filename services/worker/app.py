from celery import Celery

from core.settings import get_settings


def create_app() -> Celery:
    settings = get_settings()
    celery_app = Celery(
        "lakemirror-worker",
        broker=settings.queue.broker_url,
        backend=settings.queue.result_backend,
        include=["services.worker.tasks.mirror"],
    )
    celery_app.conf.task_default_queue = "lakemirror"
    celery_app.conf.task_routes = {
        "services.worker.tasks.*": {"queue": "lakemirror"},
    }
    # a mirrored mutation is only acknowledged once the store call returned
    celery_app.conf.task_acks_late = True
    celery_app.conf.task_reject_on_worker_lost = True
    return celery_app


app = create_app()


__all__ = ["app", "create_app"]
