from celery import Celery

from coinbasis.config import settings

celery_app = Celery(
    "coinbasis",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["coinbasis.workers.tasks"],
)
celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
)
