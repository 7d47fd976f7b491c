"""
Serializers for contacts.
"""

from rest_framework import serializers

from authentication.serializers import PublicUserSerializer
from contacts.models import Contact


class ContactSerializer(serializers.ModelSerializer):
    """Contact with the saved user's public profile."""

    contact_user = PublicUserSerializer(read_only=True)

    class Meta:
        model = Contact
        fields = [
            "id",
            "contact_user",
            "nickname",
            "is_blocked",
            "is_favorite",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ContactCreateSerializer(serializers.Serializer):
    """Input for adding a contact."""

    contact_user_id = serializers.IntegerField(min_value=1)
    nickname = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    is_favorite = serializers.BooleanField(required=False, default=False)


class ContactUpdateSerializer(serializers.Serializer):
    """Input for PATCH /contacts/{id}/."""

    nickname = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )
    is_blocked = serializers.BooleanField(required=False)
    is_favorite = serializers.BooleanField(required=False)
