import django_filters
from django.core.exceptions import ValidationError

from worker_tasks.core.validators import is_valid_work_date
from worker_tasks.models import TaskAssignment


def validate_work_date(value):
    if not is_valid_work_date(value):
        raise ValidationError("date must be a calendar day in YYYY-MM-DD format")


class TaskAssignmentFilter(django_filters.FilterSet):
    """
    Query filters for the task assignment list.
    """
    date = django_filters.CharFilter(field_name='date', validators=[validate_work_date])
    project_id = django_filters.NumberFilter(field_name='project_id')
    status = django_filters.ChoiceFilter(field_name='status', choices=TaskAssignment.STATUS_CHOICES)

    class Meta:
        model = TaskAssignment
        fields = ['date', 'project_id', 'status']
