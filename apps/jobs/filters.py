import django_filters

from .models import Job, JobStatus, PaymentStatus


class JobFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=JobStatus.choices)
    payment_status = django_filters.ChoiceFilter(choices=PaymentStatus.choices)
    as_role = django_filters.ChoiceFilter(
        choices=[("customer", "customer"), ("freelancer", "freelancer")],
        method="filter_as_role",
    )

    class Meta:
        model = Job
        fields = ["status", "payment_status"]

    def filter_as_role(self, queryset, name, value):
        user = self.request.user
        if value == "customer":
            return queryset.filter(customer=user)
        return queryset.filter(freelancer=user)
