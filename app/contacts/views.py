"""
Contacts API views.

ViewSet:
    ContactViewSet: List, add, update, remove and block/unblock contacts

All operations are scoped to request.user's own address book.
"""

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from contacts.filters import ContactFilter
from contacts.models import Contact
from contacts.serializers import (
    ContactCreateSerializer,
    ContactSerializer,
    ContactUpdateSerializer,
)
from contacts.services import ContactService


@extend_schema_view(
    list=extend_schema(
        operation_id="list_contacts",
        summary="List contacts",
        description="Favorites first. Filter with is_blocked, is_favorite or search.",
        tags=["Contacts"],
    ),
    retrieve=extend_schema(
        operation_id="get_contact",
        summary="Get contact",
        tags=["Contacts"],
    ),
    create=extend_schema(
        operation_id="add_contact",
        summary="Add contact",
        request=ContactCreateSerializer,
        responses={201: ContactSerializer},
        tags=["Contacts"],
    ),
    partial_update=extend_schema(
        operation_id="update_contact",
        summary="Update contact",
        request=ContactUpdateSerializer,
        responses={200: ContactSerializer},
        tags=["Contacts"],
    ),
    destroy=extend_schema(
        operation_id="remove_contact",
        summary="Remove contact",
        tags=["Contacts"],
    ),
)
class ContactViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for the current user's contacts.

    Endpoints:
        GET    /contacts/                 - List contacts
        POST   /contacts/                 - Add contact
        GET    /contacts/{id}/            - Get contact
        PATCH  /contacts/{id}/            - Update nickname / flags
        DELETE /contacts/{id}/            - Remove contact
        POST   /contacts/{id}/block/      - Block
        POST   /contacts/{id}/unblock/    - Unblock
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ContactSerializer
    filterset_class = ContactFilter
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Contact.objects.none()
        return ContactService.list_contacts(self.request.user)

    def create(self, request):
        serializer = ContactCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        contact = ContactService.add_contact(
            request.user,
            contact_user_id=serializer.validated_data["contact_user_id"],
            nickname=serializer.validated_data["nickname"],
            is_favorite=serializer.validated_data["is_favorite"],
        )

        return Response(ContactSerializer(contact).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        contact = self.get_object()
        serializer = ContactUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        contact = ContactService.update_contact(
            request.user, contact, **serializer.validated_data
        )

        return Response(ContactSerializer(contact).data)

    def destroy(self, request, pk=None):
        contact = self.get_object()
        ContactService.remove_contact(request.user, contact)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="block_contact",
        summary="Block contact",
        request=None,
        responses={200: ContactSerializer},
        tags=["Contacts"],
    )
    @action(detail=True, methods=["post"])
    def block(self, request, pk=None):
        contact = ContactService.block(request.user, self.get_object())
        return Response(ContactSerializer(contact).data)

    @extend_schema(
        operation_id="unblock_contact",
        summary="Unblock contact",
        request=None,
        responses={200: ContactSerializer},
        tags=["Contacts"],
    )
    @action(detail=True, methods=["post"])
    def unblock(self, request, pk=None):
        contact = ContactService.unblock(request.user, self.get_object())
        return Response(ContactSerializer(contact).data)
