import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'foodhub.settings')

app = Celery('foodhub')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()

app.conf.beat_schedule = {
    'check-low-stock-levels': {
        'task': 'api.tasks.check_low_stock_levels',
        'schedule': crontab(minute='*/30', hour='6-23'),  # Every 30 minutes during opening hours
    },
    'expire-trial-subscriptions': {
        'task': 'api.tasks.expire_trial_subscriptions',
        'schedule': crontab(hour=3, minute=0),  # Daily at 3 AM
    },
    'close-stale-kitchen-tickets': {
        'task': 'api.tasks.close_stale_kitchen_tickets',
        'schedule': crontab(hour=4, minute=30),
    },
}
