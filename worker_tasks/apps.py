from django.apps import AppConfig


class WorkerTasksConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'worker_tasks'
    verbose_name = 'Worker Task Admission'
