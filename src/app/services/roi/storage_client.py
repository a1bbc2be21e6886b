"""
Storage API client.

Fetches organization datasets and cost classifications from the storage
backend. Datasets are returned raw; shape validation happens in the
normalizer.
"""

import logging
from typing import Any, Dict, Optional

import requests
from flask import current_app

from src.common.exceptions import ClassificationUnavailableError, ConfigurationError, LoadError
from .engine.models.classification import CostClassification

logger = logging.getLogger(__name__)


class StorageClient:
    """Thin wrapper over the storage REST API"""

    def __init__(self, base_url: str, timeout: float = 10, api_key: Optional[str] = None, session=None):
        if not base_url:
            raise ConfigurationError("Storage API URL is not configured")
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})
        if api_key:
            self.session.headers.update({'X-API-Key': api_key})

    @classmethod
    def from_app_config(cls, session=None) -> "StorageClient":
        config = current_app.config
        return cls(
            base_url=config.get('STORAGE_API_URL'),
            timeout=config.get('STORAGE_API_TIMEOUT', 10),
            api_key=config.get('STORAGE_API_KEY'),
            session=session,
        )

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        return self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)

    def load_dataset(self, org_id: str) -> Dict[str, Any]:
        """
        Load the raw dataset of an organization.

        Args:
            org_id: Organization ID

        Returns:
            Raw dataset dict (groups, processes, globalDefaults)

        Raises:
            LoadError: transport failure, non-JSON body or unsuccessful response
        """
        try:
            response = self._get('/data/load', params={'organizationId': org_id})
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Dataset load failed for org {org_id}: {str(e)}")
            raise LoadError(f"Failed to load data for organization {org_id}", organization_id=org_id,
                            details={'error': str(e)})
        except ValueError as e:
            logger.error(f"Dataset response for org {org_id} is not JSON: {str(e)}")
            raise LoadError("Storage returned an invalid response", organization_id=org_id)

        if not isinstance(payload, dict) or not payload.get('success') or payload.get('data') is None:
            message = payload.get('error') if isinstance(payload, dict) else None
            logger.error(f"Dataset load unsuccessful for org {org_id}: {message}")
            raise LoadError(message or f"No data returned for organization {org_id}", organization_id=org_id)

        logger.info(f"Dataset loaded for org {org_id}")
        return payload['data']

    def load_cost_classification(self, org_id: str) -> CostClassification:
        """
        Load the hard/soft cost classification of an organization.

        Raises:
            ClassificationUnavailableError: request failed or no classification is stored
            ShapeError: the stored hard or soft cost list is not a list
        """
        try:
            response = self._get(f'/cost-classification/{org_id}')
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Cost classification request failed for org {org_id}: {str(e)}")
            raise ClassificationUnavailableError(organization_id=org_id, details={'error': str(e)})
        except ValueError:
            raise ClassificationUnavailableError("Storage returned an invalid classification response",
                                                 organization_id=org_id)

        if not isinstance(payload, dict) or not payload.get('success') or not payload.get('classification'):
            raise ClassificationUnavailableError(f"No cost classification stored for organization {org_id}",
                                                 organization_id=org_id)

        return CostClassification.from_dict(payload['classification'], organization_id=org_id)

    def ping(self) -> bool:
        """True when the storage API answers at all"""
        try:
            self._get('/health')
            return True
        except requests.exceptions.RequestException:
            return False
