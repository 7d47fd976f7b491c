"""
URL configuration for contacts app.

Contacts:
    GET/POST          /contacts/
    GET/PATCH/DELETE  /contacts/{id}/
    POST              /contacts/{id}/block/
    POST              /contacts/{id}/unblock/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from contacts.views import ContactViewSet

app_name = "contacts"

router = DefaultRouter()
router.register("contacts", ContactViewSet, basename="contact")

urlpatterns = [
    path("", include(router.urls)),
]
