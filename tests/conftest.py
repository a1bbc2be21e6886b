"""
Pytest Configuration - Automation ROI Service
Provides the application, client and dataset fixtures shared by the suite
"""
import os
import pytest

# Set test environment before the app is imported
os.environ['FLASK_ENV'] = 'testing'

from src.app import create_app
from src.app.services.roi.engine.core.normalizer import normalize_dataset
from src.app.services.roi.engine.models.classification import CostClassification
from src.app.services.roi.roi_service import workspace_registry


# ============================================================================
# App and Client Fixtures
# ============================================================================

@pytest.fixture(scope='session')
def app():
    """Create Flask app for the testing session.

    The RESTX Api is module level, so the app is built once per session.
    """
    app = create_app('testing')

    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Test client for the API"""
    return app.test_client()


@pytest.fixture(autouse=True)
def clean_workspaces():
    """Every test starts without session workspaces"""
    workspace_registry.clear()
    yield
    workspace_registry.clear()


# ============================================================================
# Dataset Fixtures
# ============================================================================

def build_raw_dataset():
    """
    Raw organization dataset.

    invoice-entry: 100 tasks/month x 30 min at the Operations wage of 30/h,
    80% coverage, 5000 upfront, 100/month software, one month to implement.
    vendor-onboarding: unselected, with a large upfront cost.
    """
    return {
        "groups": [
            {
                "id": "g-ops",
                "name": "Operations",
                "averageHourlyWage": 30,
                "engine": "Value Delivery",
            },
            {
                "id": "g-fin",
                "name": "Finance",
                "engine": "Finance",
            },
        ],
        "processes": [
            {
                "id": "invoice-entry",
                "name": "Invoice entry",
                "group": "Operations",
                "selected": True,
                "taskVolume": 100,
                "taskVolumeUnit": "month",
                "timePerTask": 30,
                "timeUnit": "minutes",
                "implementationCosts": {
                    "softwareCost": 100,
                    "automationCoverage": 80,
                    "implementationTimelineMonths": 4.33,
                    "upfrontCosts": 5000,
                    "startMonth": 1,
                },
            },
            {
                "id": "vendor-onboarding",
                "name": "Vendor onboarding",
                "group": "Finance",
                "selected": False,
                "averageHourlyWage": 50,
                "taskVolume": 20,
                "taskVolumeUnit": "week",
                "timePerTask": 1,
                "timeUnit": "hours",
                "implementationCosts": {
                    "softwareCost": 500,
                    "upfrontCosts": 99999,
                },
            },
        ],
    }


def build_classification_payload():
    return {
        "organizationId": "org-1",
        "hardCosts": ["laborCosts", "overtimePremiums", "softwareLicensing"],
        "softCosts": ["decisionDelays", "customerImpactCosts"],
    }


@pytest.fixture
def raw_dataset():
    """Fresh raw dataset dict"""
    return build_raw_dataset()


@pytest.fixture
def dataset(raw_dataset):
    """Normalized dataset"""
    return normalize_dataset(raw_dataset)


@pytest.fixture
def classification_payload():
    return build_classification_payload()


@pytest.fixture
def cost_classification(classification_payload):
    return CostClassification.from_dict(classification_payload)
