import django_filters

from .models import Service, ServiceCategory


SORT_ORDERINGS = {
    "rating": ("-provider__profile__avg_rating", "-created_at"),
    "price_asc": ("price_thb", "-created_at"),
    "price_desc": ("-price_thb", "-created_at"),
    "jobs": ("-provider__profile__total_jobs", "-created_at"),
}


class ServiceFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(choices=ServiceCategory.choices)
    sort = django_filters.ChoiceFilter(
        choices=[(key, key) for key in SORT_ORDERINGS],
        method="sort_by",
        empty_label=None,
    )

    class Meta:
        model = Service
        fields = ["category"]

    def sort_by(self, queryset, name, value):
        return queryset.order_by(*SORT_ORDERINGS.get(value, SORT_ORDERINGS["rating"]))
