"""
Integration tests for the Secrets Manager client against moto.
"""
import asyncio
import json
import os
import sys

import boto3
import pytest
from moto import mock_aws

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import BatchGetSecretValueRequest, VersionSelector
from services.secrets_manager_service import SecretManagerClient
from utils.exceptions import SecretManagerError

REGION = 'us-east-1'
SETTINGS = {
    'region': REGION,
    'auth': {'accessKeyId': 'testing', 'secretAccessKey': 'testing'},
}


@pytest.fixture
def secrets_client():
    """Initialized handle plus a plain boto3 client for seeding data."""
    with mock_aws():
        seed = boto3.client('secretsmanager', region_name=REGION,
                            aws_access_key_id='testing', aws_secret_access_key='testing')
        handle = SecretManagerClient()
        assert handle.init(SETTINGS) is None
        yield handle, seed
        handle.close()


@pytest.mark.secrets_manager_integration
def test_describe_secret(secrets_client):
    """Test describe-secret returns metadata without the value."""
    handle, seed = secrets_client
    seed.create_secret(
        Name='wordpress-credentials',
        Description='WordPress API credentials',
        SecretString=json.dumps({'username': 'admin'}),
        Tags=[{'Key': 'team', 'Value': 'platform'}],
    )

    description = asyncio.run(handle.describe_secret('wordpress-credentials'))

    assert description.name == 'wordpress-credentials'
    assert description.description == 'WordPress API credentials'
    assert description.arn.startswith('arn:aws:secretsmanager:us-east-1:')
    assert [(t.key, t.value) for t in description.tags] == [('team', 'platform')]
    assert not hasattr(description, 'secret_string')


@pytest.mark.secrets_manager_integration
def test_get_secret_value_current_and_previous(secrets_client):
    """Test version stages select the right secret version."""
    handle, seed = secrets_client
    seed.create_secret(Name='api-key', SecretString='first')
    seed.put_secret_value(SecretId='api-key', SecretString='second')

    current = asyncio.run(handle.get_secret_value('api-key'))
    previous = asyncio.run(handle.get_secret_value(
        'api-key', VersionSelector(version_stage='AWSPREVIOUS')
    ))

    assert current.secret_string == 'second'
    assert 'AWSCURRENT' in current.version_stages
    assert previous.secret_string == 'first'
    assert previous.version_id != current.version_id


@pytest.mark.secrets_manager_integration
def test_get_secret_value_by_version_id(secrets_client):
    handle, seed = secrets_client
    created = seed.create_secret(Name='api-key', SecretString='first')

    value = asyncio.run(handle.get_secret_value(
        'api-key', {'versionId': created['VersionId']}
    ))

    assert value.secret_string == 'first'
    assert value.version_id == created['VersionId']


@pytest.mark.secrets_manager_integration
def test_get_secret_value_binary(secrets_client):
    handle, seed = secrets_client
    seed.create_secret(Name='certificate', SecretBinary=b'\x00\x01\x02')

    value = asyncio.run(handle.get_secret_value('certificate'))

    assert value.secret_binary == b'\x00\x01\x02'
    assert value.secret_string is None


@pytest.mark.secrets_manager_integration
def test_get_secret_value_not_found(secrets_client):
    """Test a missing secret is returned as an error value."""
    handle, _ = secrets_client

    result = asyncio.run(handle.get_secret_value('does-not-exist'))

    assert isinstance(result, SecretManagerError)
    assert 'get-secret-value' in result.message
    assert 'ResourceNotFoundException' in result.message


@pytest.mark.secrets_manager_integration
def test_batch_get_secret_value(secrets_client):
    handle, seed = secrets_client
    seed.create_secret(Name='db-user', SecretString='admin')
    seed.create_secret(Name='db-pass', SecretString='hunter2')

    result = asyncio.run(handle.batch_get_secret_value(
        BatchGetSecretValueRequest(secret_ids=['db-user', 'db-pass'])
    ))

    assert not isinstance(result, SecretManagerError)
    values = {v.name: v.secret_string for v in result.secret_values}
    assert values == {'db-user': 'admin', 'db-pass': 'hunter2'}


@pytest.mark.secrets_manager_integration
def test_close_then_operation():
    """Test a closed handle reports the missing client."""
    with mock_aws():
        handle = SecretManagerClient()
        assert handle.init(SETTINGS) is None
        assert handle.close() is None

        result = asyncio.run(handle.describe_secret('anything'))

    assert isinstance(result, SecretManagerError)
    assert 'not initialized' in result.message
