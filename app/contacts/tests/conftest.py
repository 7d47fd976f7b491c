"""
Test configuration and fixtures for contacts tests.
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory
from contacts.tests.factories import ContactFactory


@pytest.fixture
def owner(db):
    """User whose address book is under test."""
    return UserFactory(username="owner", display_name="Owner")


@pytest.fixture
def friend(db):
    """User saved in the owner's address book."""
    return UserFactory(username="friend", display_name="Friend")


@pytest.fixture
def stranger(db):
    """User with no relation to the owner."""
    return UserFactory(username="stranger", display_name="Stranger")


@pytest.fixture
def contact(owner, friend):
    """The owner's contact entry for friend."""
    return ContactFactory(owner=owner, contact_user=friend, nickname="Buddy")


@pytest.fixture
def owner_client(owner):
    """API client authenticated as owner."""
    client = APIClient()
    client.force_authenticate(user=owner)
    return client
