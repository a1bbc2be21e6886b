"""
Tests for the ROI API endpoints
"""
from unittest.mock import MagicMock, patch

import pytest

from src.common.exceptions import LoadError, ShapeError


BASE = '/api/v1/roi'


@pytest.fixture
def calculate_body(raw_dataset, classification_payload):
    return {
        "dataset": raw_dataset,
        "costClassification": classification_payload,
        "timeHorizonMonths": 36,
        "cashflowMonths": 12,
    }


@pytest.fixture
def storage(raw_dataset, cost_classification):
    storage = MagicMock()
    storage.load_dataset.return_value = raw_dataset
    storage.load_cost_classification.return_value = cost_classification
    with patch('src.app.services.roi.roi_service.StorageClient') as storage_cls:
        storage_cls.from_app_config.return_value = storage
        yield storage


class TestCalculateEndpoint:
    """POST /api/v1/roi/calculate"""

    def test_calculate_success(self, client, calculate_body):
        response = client.post(f'{BASE}/calculate', json=calculate_body)

        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        assert body['message'] == 'ROI calculated'
        assert body['data']['breakEvenMonth'] == 5
        assert len(body['data']['cashflow']) == 12
        assert body['data']['opportunityMatrix']['startingProcessId'] == 'invoice-entry'

    def test_calculate_blocked_without_classification(self, client, calculate_body):
        del calculate_body['costClassification']
        response = client.post(f'{BASE}/calculate', json=calculate_body)

        assert response.status_code == 202
        assert response.get_json()['success'] is True

    def test_calculate_malformed_processes(self, client, calculate_body):
        calculate_body['dataset']['processes'] = {"invoice-entry": {}}
        response = client.post(f'{BASE}/calculate', json=calculate_body)

        assert response.status_code == 422
        body = response.get_json()
        assert body['success'] is False
        assert body['data']['field'] == 'processes'
        assert body['data']['error_code'] == 'SHAPE_ERROR'

    def test_calculate_rejects_non_list_cost_classification(self, client, calculate_body):
        calculate_body['costClassification'] = {"hardCosts": 3, "softCosts": None}
        response = client.post(f'{BASE}/calculate', json=calculate_body)

        assert response.status_code == 422
        body = response.get_json()
        assert body['data']['field'] == 'hardCosts'
        assert body['data']['error_code'] == 'SHAPE_ERROR'

    def test_calculate_invalid_horizon(self, client, calculate_body):
        calculate_body['timeHorizonMonths'] = 0
        response = client.post(f'{BASE}/calculate', json=calculate_body)

        assert response.status_code == 400
        assert 'timeHorizonMonths' in response.get_json()['data']['validation_errors']

    def test_calculate_missing_dataset(self, client):
        response = client.post(f'{BASE}/calculate', json={})
        assert response.status_code == 400
        assert 'dataset' in response.get_json()['data']['validation_errors']

    def test_calculate_unexpected_error(self, client, calculate_body):
        with patch('src.app.api.v1.routes.roi.roi_routes.ROIService.calculate',
                   side_effect=RuntimeError("boom")):
            response = client.post(f'{BASE}/calculate', json=calculate_body)

        assert response.status_code == 500
        assert response.get_json()['data']['error_details'] == 'boom'


class TestStatelessEndpoints:
    def test_normalize(self, client, raw_dataset):
        response = client.post(f'{BASE}/normalize', json={"dataset": raw_dataset})

        assert response.status_code == 200
        processes = response.get_json()['data']['processes']
        assert [p['id'] for p in processes] == ['invoice-entry', 'vendor-onboarding']

    def test_normalize_empty_collections(self, client):
        response = client.post(f'{BASE}/normalize', json={"dataset": {"groups": [], "processes": []}})
        assert response.status_code == 200
        assert response.get_json()['data']['processes'] == []

    def test_normalize_missing_collection(self, client):
        response = client.post(f'{BASE}/normalize', json={"dataset": {"processes": []}})
        assert response.status_code == 422
        assert response.get_json()['data']['field'] == 'groups'

    def test_scenario(self, client, calculate_body):
        calculate_body['coveragePercentage'] = 50
        response = client.post(f'{BASE}/scenario', json=calculate_body)

        assert response.status_code == 200
        assert response.get_json()['data']['coveragePercentage'] == 50

    def test_scenario_requires_coverage(self, client, calculate_body):
        response = client.post(f'{BASE}/scenario', json=calculate_body)
        assert response.status_code == 400

    def test_cfo_score(self, client):
        response = client.post(f'{BASE}/cfo-score', json={
            "initialCost": 50000,
            "savingsYears": [40000, 40000, 40000],
            "complexityIndex": 4.5,
        })

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['quadrant'] == 'Quick Win'
        assert data['cfoScoreNorm'] == 6.57

    def test_cfo_score_validation(self, client):
        response = client.post(f'{BASE}/cfo-score', json={"initialCost": -1})
        assert response.status_code == 400

    def test_complexity(self, client):
        response = client.post(f'{BASE}/complexity', json={
            "inputsCount": 4, "stepsCount": 10, "dependenciesCount": 2
        })

        assert response.status_code == 200
        assert response.get_json()['data']['riskCategory'] == 'Moderate'

    def test_complexity_requires_a_count(self, client):
        response = client.post(f'{BASE}/complexity', json={})
        assert response.status_code == 400


class TestWorkspaceEndpoints:
    """Session workspaces under /api/v1/roi/workspaces/<session_id>"""

    def test_switch_organization(self, client, storage):
        response = client.post(f'{BASE}/workspaces/s1/organization', json={"organizationId": "org-1"})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['status']['orgId'] == 'org-1'
        assert data['breakEvenMonth'] == 19
        storage.load_dataset.assert_called_once_with('org-1')

    def test_switch_organization_requires_id(self, client, storage):
        response = client.post(f'{BASE}/workspaces/s1/organization', json={})
        assert response.status_code == 400

    def test_switch_organization_load_error(self, client, storage):
        storage.load_dataset.side_effect = LoadError("Storage unavailable", organization_id="org-1")
        response = client.post(f'{BASE}/workspaces/s1/organization', json={"organizationId": "org-1"})

        assert response.status_code == 502
        body = response.get_json()
        assert body['message'] == 'Storage unavailable'
        assert body['data'] == {"organization_id": "org-1", "error_code": "LOAD_ERROR"}

    def test_status(self, client, storage):
        client.post(f'{BASE}/workspaces/s1/organization', json={"organizationId": "org-1"})
        response = client.get(f'{BASE}/workspaces/s1/status')

        assert response.status_code == 200
        assert response.get_json()['data']['roiReady'] is True

    def test_status_unknown_workspace(self, client):
        response = client.get(f'{BASE}/workspaces/nobody/status')
        assert response.status_code == 404
        assert response.get_json()['data']['resource_type'] == 'Workspace'

    def test_recalculate(self, client, storage):
        client.post(f'{BASE}/workspaces/s1/organization', json={"organizationId": "org-1"})
        response = client.post(f'{BASE}/workspaces/s1/recalculate', json={
            "reason": "deselect",
            "deselectProcessIds": ["vendor-onboarding"],
        })

        assert response.status_code == 200
        assert response.get_json()['data']['status']['selectedCount'] == 1

    def test_recalculate_unknown_workspace(self, client):
        response = client.post(f'{BASE}/workspaces/nobody/recalculate', json={})
        assert response.status_code == 404

    def test_reset_controller(self, client, storage):
        client.post(f'{BASE}/workspaces/s1/organization', json={"organizationId": "org-1"})
        response = client.delete(f'{BASE}/workspaces/s1/controller')

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Recalculation controller reset'

    def test_reset_controller_unknown_workspace(self, client):
        response = client.delete(f'{BASE}/workspaces/nobody/controller')
        assert response.status_code == 404

    def test_close_workspace(self, client, storage):
        client.post(f'{BASE}/workspaces/s1/organization', json={"organizationId": "org-1"})

        response = client.delete(f'{BASE}/workspaces/s1')

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Workspace closed'
        assert response.get_json()['data'] == {"sessionId": "s1"}
        assert client.get(f'{BASE}/workspaces/s1/status').status_code == 404

    def test_close_unknown_workspace(self, client):
        response = client.delete(f'{BASE}/workspaces/nobody')
        assert response.status_code == 404
        assert response.get_json()['data']['resource_type'] == 'Workspace'

    def test_switch_organization_malformed_classification(self, client, storage):
        storage.load_cost_classification.side_effect = ShapeError(
            "'softCosts' must be a list, got str", field="softCosts"
        )
        response = client.post(f'{BASE}/workspaces/s1/organization', json={"organizationId": "org-1"})

        assert response.status_code == 422
        assert response.get_json()['data']['field'] == 'softCosts'
