"""
Django admin configuration for contacts.
"""

from django.contrib import admin

from contacts.models import Contact


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("owner", "contact_user", "nickname", "is_blocked", "is_favorite")
    list_filter = ("is_blocked", "is_favorite")
    search_fields = ("owner__email", "contact_user__email", "nickname")
    raw_id_fields = ("owner", "contact_user")
    readonly_fields = ("created_at", "updated_at")
