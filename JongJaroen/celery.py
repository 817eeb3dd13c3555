import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'JongJaroen.settings')

app = Celery('JongJaroen')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

app.conf.beat_schedule = {
    # lottery tickets are counted per calendar month
    "reset-monthly-lottery-counts": {
        "task": "apps.users.tasks.reset_monthly_lottery_counts",
        "schedule": crontab(minute=0, hour=0, day_of_month=1),
    },
}
