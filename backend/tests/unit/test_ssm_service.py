"""Unit tests for SSMService using moto."""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from moto import mock_aws

from payments.services.ssm_service import SSMService, SSMServiceError

PARAMETER = "/payments/dev/stripe/secret_key"


@pytest.fixture
def ssm_client():
    with mock_aws():
        client = boto3.client("ssm", region_name="eu-west-1")
        client.put_parameter(Name=PARAMETER, Value="sk_test_ssm", Type="SecureString")
        yield client


class TestGetParameter:
    def test_returns_decrypted_value(self, ssm_client):
        service = SSMService(client=ssm_client)

        assert service.get_parameter(PARAMETER) == "sk_test_ssm"

    def test_caches_value(self, ssm_client):
        service = SSMService(client=ssm_client)
        service.get_parameter(PARAMETER)
        ssm_client.put_parameter(
            Name=PARAMETER, Value="sk_test_rotated", Type="SecureString", Overwrite=True
        )

        assert service.get_parameter(PARAMETER) == "sk_test_ssm"
        assert service.get_parameter(PARAMETER, use_cache=False) == "sk_test_rotated"

    def test_clear_cache(self, ssm_client):
        service = SSMService(client=ssm_client)
        service.get_parameter(PARAMETER)
        ssm_client.put_parameter(
            Name=PARAMETER, Value="sk_test_rotated", Type="SecureString", Overwrite=True
        )

        service.clear_cache()

        assert service.get_parameter(PARAMETER) == "sk_test_rotated"

    def test_missing_parameter(self, ssm_client):
        service = SSMService(client=ssm_client)

        with pytest.raises(SSMServiceError, match="not found"):
            service.get_parameter("/payments/dev/nope")

    def test_access_denied(self):
        client = MagicMock()
        client.get_parameter.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
            "GetParameter",
        )

        with pytest.raises(SSMServiceError, match="Access denied"):
            SSMService(client=client).get_parameter(PARAMETER)

    def test_connection_error(self):
        client = MagicMock()
        client.get_parameter.side_effect = EndpointConnectionError(
            endpoint_url="https://ssm.eu-west-1.amazonaws.com"
        )

        with pytest.raises(SSMServiceError, match="Failed to retrieve"):
            SSMService(client=client).get_parameter(PARAMETER)
