import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(method='filter_status')
    service_type = django_filters.CharFilter(field_name='service_type', lookup_expr='iexact')
    # Whole local days, both ends inclusive
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = Order
        fields = ['status', 'service_type', 'date_from', 'date_to']

    def filter_status(self, queryset, name, value):
        if value.lower() == 'all':
            return queryset
        return queryset.filter(status__iexact=value)
