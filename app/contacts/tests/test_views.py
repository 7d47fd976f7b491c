"""
Tests for contacts API views.

Endpoints:
    GET/POST          /api/v1/contacts/
    GET/PATCH/DELETE  /api/v1/contacts/{id}/
    POST              /api/v1/contacts/{id}/block/
    POST              /api/v1/contacts/{id}/unblock/
"""

from rest_framework import status
from rest_framework.test import APIClient

from contacts.models import Contact
from contacts.tests.factories import ContactFactory

CONTACTS_URL = "/api/v1/contacts/"


def contact_url(contact_id, suffix=""):
    """Generate URL for a contact detail or action endpoint."""
    return f"{CONTACTS_URL}{contact_id}/{suffix}"


class TestContactList:
    """Tests for GET /api/v1/contacts/."""

    def test_lists_own_contacts(self, contact, owner_client, friend):
        ContactFactory()

        response = owner_client.get(CONTACTS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        result = response.data["results"][0]
        assert result["nickname"] == "Buddy"
        assert result["contact_user"]["id"] == friend.id
        assert result["contact_user"]["display_name"] == "Friend"

    def test_filter_blocked(self, contact, owner, owner_client):
        blocked = ContactFactory(owner=owner, is_blocked=True)

        response = owner_client.get(CONTACTS_URL, {"is_blocked": "true"})

        assert [c["id"] for c in response.data["results"]] == [blocked.id]

    def test_search_by_username(self, contact, owner, owner_client):
        ContactFactory(owner=owner, nickname="Someone else")

        response = owner_client.get(CONTACTS_URL, {"search": "frie"})

        assert [c["id"] for c in response.data["results"]] == [contact.id]

    def test_requires_authentication(self, db):
        response = APIClient().get(CONTACTS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestContactCreate:
    """Tests for POST /api/v1/contacts/."""

    def test_adds_contact(self, owner_client, friend):
        response = owner_client.post(
            CONTACTS_URL,
            {"contact_user_id": friend.id, "nickname": "F"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["nickname"] == "F"
        assert response.data["is_favorite"] is False

    def test_duplicate_is_conflict(self, contact, owner_client, friend):
        response = owner_client.post(
            CONTACTS_URL, {"contact_user_id": friend.id}, format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "CONTACT_EXISTS"

    def test_self_is_rejected(self, owner_client, owner):
        response = owner_client.post(
            CONTACTS_URL, {"contact_user_id": owner.id}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "CONTACT_SELF"

    def test_missing_user_id(self, owner_client):
        response = owner_client.post(CONTACTS_URL, {}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "contact_user_id" in response.data


class TestContactDetail:
    """Tests for GET/PATCH/DELETE /api/v1/contacts/{id}/."""

    def test_get(self, contact, owner_client):
        response = owner_client.get(contact_url(contact.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == contact.id

    def test_other_users_contact_is_hidden(self, contact, stranger):
        client = APIClient()
        client.force_authenticate(user=stranger)

        response = client.get(contact_url(contact.id))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_patch(self, contact, owner_client):
        response = owner_client.patch(
            contact_url(contact.id), {"is_favorite": True}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["is_favorite"] is True
        assert response.data["nickname"] == "Buddy"

    def test_delete(self, contact, owner_client):
        response = owner_client.delete(contact_url(contact.id))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Contact.objects.exists()


class TestContactBlockActions:
    """Tests for block/unblock actions."""

    def test_block_then_unblock(self, contact, owner_client):
        response = owner_client.post(contact_url(contact.id, "block/"))
        assert response.status_code == status.HTTP_200_OK
        assert response.data["is_blocked"] is True

        response = owner_client.post(contact_url(contact.id, "unblock/"))
        assert response.data["is_blocked"] is False

    def test_blocked_contact_cannot_start_dm(self, contact, owner_client, friend):
        """
        A user blocked by the owner cannot open a direct conversation.

        Why it matters: Block is enforced where conversations are created.
        """
        owner_client.post(contact_url(contact.id, "block/"))
        friend_client = APIClient()
        friend_client.force_authenticate(user=friend)

        response = friend_client.post(
            "/api/v1/conversations/",
            {"conversation_type": "direct", "participant_ids": [contact.owner_id]},
            format="json",
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "CONTACT_BLOCKED"
