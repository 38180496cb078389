"""
Celery Application Configuration

Environment:
- REDIS_URL: broker and result backend
- RIDESCORE_TASK_TIME_LIMIT: hard limit per task, in seconds
- RIDESCORE_QUEUE: queue the scoring tasks are published to
- RIDESCORE_RESULT_EXPIRES: seconds a task result is kept in the backend
"""

from celery import Celery
import os

REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
TASK_TIME_LIMIT = int(os.getenv('RIDESCORE_TASK_TIME_LIMIT', '300'))
SCORING_QUEUE = os.getenv('RIDESCORE_QUEUE', 'ridescore')
RESULT_EXPIRES = int(os.getenv('RIDESCORE_RESULT_EXPIRES', '3600'))

app = Celery('ridescore', broker=REDIS_URL, backend=REDIS_URL)

app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=TASK_TIME_LIMIT,
    task_default_queue=SCORING_QUEUE,
    result_expires=RESULT_EXPIRES,
    worker_prefetch_multiplier=1,  # tasks are short and CPU bound
)

app.autodiscover_tasks(['ridescore.tasks'])

__all__ = ['app', 'REDIS_URL', 'SCORING_QUEUE', 'TASK_TIME_LIMIT']
