import django_filters as filters

from contacts.models import Contact


class ContactFilter(filters.FilterSet):
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = Contact
        fields = ["is_blocked", "is_favorite", "search"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(nickname__icontains=value) | queryset.filter(
            contact_user__username__icontains=value
        )
