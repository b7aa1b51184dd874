# backend/clinic_core/audit/filters.py
import django_filters

from clinic_core.audit.models import AuditEntry


class AuditEntryFilter(django_filters.FilterSet):
    actor_id = django_filters.NumberFilter(field_name="actor_user_id")
    action = django_filters.CharFilter(field_name="action")
    affected_table = django_filters.CharFilter(field_name="affected_table")
    occurred_after = django_filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="gte")
    occurred_before = django_filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="lte")

    class Meta:
        model = AuditEntry
        fields = ["actor_id", "action", "affected_table", "occurred_after", "occurred_before"]
