"""
Tests for the storage API client
"""
from unittest.mock import MagicMock

import pytest
import requests

from src.common.exceptions import ClassificationUnavailableError, ConfigurationError, LoadError, ShapeError
from src.app.services.roi.storage_client import StorageClient


def make_response(payload=None, status_error=None, json_error=None):
    response = MagicMock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def storage(session):
    return StorageClient("http://storage.test/", timeout=5, api_key="key-1", session=session)


class TestStorageClientSetup:
    def test_missing_url_raises(self):
        with pytest.raises(ConfigurationError):
            StorageClient(None)

    def test_headers_and_base_url(self, storage, session):
        assert storage.base_url == "http://storage.test"
        session.headers.update.assert_any_call({'Accept': 'application/json'})
        session.headers.update.assert_any_call({'X-API-Key': 'key-1'})

    def test_from_app_config(self, app):
        client = StorageClient.from_app_config(session=MagicMock())
        assert client.base_url == app.config['STORAGE_API_URL']
        assert client.timeout == app.config['STORAGE_API_TIMEOUT']


class TestLoadDataset:
    """GET /data/load?organizationId=..."""

    def test_success(self, storage, session, raw_dataset):
        session.get.return_value = make_response({"success": True, "data": raw_dataset})

        assert storage.load_dataset("org-1") == raw_dataset
        session.get.assert_called_once_with(
            "http://storage.test/data/load", params={'organizationId': 'org-1'}, timeout=5
        )

    def test_transport_failure(self, storage, session):
        session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(LoadError) as exc_info:
            storage.load_dataset("org-1")
        assert exc_info.value.organization_id == "org-1"
        assert exc_info.value.error_code == "LOAD_ERROR"
        assert exc_info.value.status_code == 502

    def test_http_error(self, storage, session):
        session.get.return_value = make_response(status_error=requests.exceptions.HTTPError("500"))
        with pytest.raises(LoadError):
            storage.load_dataset("org-1")

    def test_non_json_body(self, storage, session):
        session.get.return_value = make_response(json_error=ValueError("not json"))
        with pytest.raises(LoadError) as exc_info:
            storage.load_dataset("org-1")
        assert exc_info.value.message == "Storage returned an invalid response"

    def test_unsuccessful_payload_uses_storage_message(self, storage, session):
        session.get.return_value = make_response({"success": False, "error": "Organization not found"})
        with pytest.raises(LoadError) as exc_info:
            storage.load_dataset("org-1")
        assert exc_info.value.message == "Organization not found"

    def test_missing_data(self, storage, session):
        session.get.return_value = make_response({"success": True, "data": None})
        with pytest.raises(LoadError):
            storage.load_dataset("org-1")


class TestLoadCostClassification:
    """GET /cost-classification/<org>"""

    def test_success_with_item_objects(self, storage, session):
        session.get.return_value = make_response({
            "success": True,
            "classification": {
                "hardCosts": [{"key": "laborCosts"}, "softwareLicensing"],
                "softCosts": [{"id": "decisionDelays"}, {"label": "no key"}],
                "lastModified": "2024-03-01T10:00:00Z",
            },
        })

        classification = storage.load_cost_classification("org-1")

        assert classification.organization_id == "org-1"
        assert classification.hard_costs == ["laborCosts", "softwareLicensing"]
        assert classification.soft_costs == ["decisionDelays"]
        assert classification.last_modified == "2024-03-01T10:00:00Z"
        session.get.assert_called_once_with(
            "http://storage.test/cost-classification/org-1", params=None, timeout=5
        )

    def test_not_stored(self, storage, session):
        session.get.return_value = make_response({"success": True, "classification": None})
        with pytest.raises(ClassificationUnavailableError) as exc_info:
            storage.load_cost_classification("org-1")
        assert exc_info.value.organization_id == "org-1"

    def test_transport_failure(self, storage, session):
        session.get.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(ClassificationUnavailableError):
            storage.load_cost_classification("org-1")

    def test_absent_cost_lists_are_empty(self, storage, session):
        session.get.return_value = make_response({"success": True, "classification": {"modifiedBy": "cfo"}})

        classification = storage.load_cost_classification("org-1")

        assert classification.hard_costs == []
        assert classification.soft_costs == []
        assert classification.modified_by == "cfo"

    @pytest.mark.parametrize('payload,field', [
        ({"hardCosts": 3, "softCosts": []}, "hardCosts"),
        ({"hardCosts": None}, "hardCosts"),
        ({"hardCosts": [], "softCosts": "laborCosts"}, "softCosts"),
        ({"softCosts": {"key": "laborCosts"}}, "softCosts"),
    ])
    def test_non_list_cost_lists_raise(self, storage, session, payload, field):
        session.get.return_value = make_response({"success": True, "classification": payload})

        with pytest.raises(ShapeError) as exc_info:
            storage.load_cost_classification("org-1")

        assert exc_info.value.field == field


class TestPing:
    def test_any_answer_is_reachable(self, storage, session):
        session.get.return_value = make_response({})
        assert storage.ping() is True

    def test_unreachable(self, storage, session):
        session.get.side_effect = requests.exceptions.ConnectionError()
        assert storage.ping() is False
