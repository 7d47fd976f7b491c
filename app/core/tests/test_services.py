"""
Tests for BaseService helpers.
"""

import pytest

from authentication.models import User
from authentication.tests.factories import UserFactory
from core.exceptions import ValidationError
from core.services import BaseService


class ExampleService(BaseService):
    pass


class TestGetLogger:
    def test_logger_named_after_service(self):
        logger = ExampleService.get_logger()

        assert logger.name == f"{__name__}.ExampleService"


class TestAtomic:
    def test_rolls_back_on_error(self, db):
        """
        An exception inside atomic() undoes the writes made inside it.

        Why it matters: Multi-row service operations must be all or nothing.
        """
        with pytest.raises(RuntimeError):
            with ExampleService.atomic():
                UserFactory(username="ghost")
                raise RuntimeError("boom")

        assert not User.objects.filter(username="ghost").exists()

    def test_commits_on_success(self, db):
        with ExampleService.atomic():
            UserFactory(username="kept")

        assert User.objects.filter(username="kept").exists()


class TestValidateRequired:
    def test_passes_when_all_present(self):
        ExampleService.validate_required(file_url="https://x", file_name="a.pdf")

    def test_lists_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            ExampleService.validate_required(file_url=None, file_name="  ", size=0)

        assert exc_info.value.details == {
            "file_url": ["This field is required."],
            "file_name": ["This field is required."],
        }
