"""
Unit tests for configuration module.
"""
import pytest
import os
from unittest.mock import patch
from config import (
    Config,
    ConnectionConfig,
    ContainerRole,
    GlobalRegion,
    InstanceProfileRole,
    SessionCredentials,
    StaticCredentials,
    get_config,
    parse_auth,
    parse_connection_config,
    parse_region,
)
from utils.exceptions import ConfigurationError


@pytest.mark.config
class TestParseRegion:
    """Tests for region resolution."""

    @pytest.mark.parametrize("region_id, expected", [
        ("aws-global", GlobalRegion.AWS_GLOBAL),
        ("aws-cn-global", GlobalRegion.AWS_CN_GLOBAL),
        ("aws-us-gov-global", GlobalRegion.AWS_US_GOV_GLOBAL),
        ("aws-iso-global", GlobalRegion.AWS_ISO_GLOBAL),
        ("aws-iso-b-global", GlobalRegion.AWS_ISO_B_GLOBAL),
    ])
    def test_global_regions_use_canonical_constant(self, region_id, expected):
        """Test global region ids resolve to the canonical enum member."""
        region = parse_region(region_id)
        assert region is expected
        assert isinstance(region, GlobalRegion)

    def test_regular_region_passes_through(self):
        """Test a regular region id is returned unchanged."""
        region = parse_region("eu-west-1")
        assert region == "eu-west-1"
        assert not isinstance(region, GlobalRegion)

    def test_unknown_region_is_not_rejected(self):
        """Test unknown region strings are accepted verbatim."""
        assert parse_region("mars-north-7") == "mars-north-7"

    @pytest.mark.parametrize("region", [None, "", 42])
    def test_missing_or_invalid_region(self, region):
        """Test a missing or non-string region is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_region(region)
        assert exc_info.value.field == "region"


@pytest.mark.config
class TestParseAuth:
    """Tests for auth mode resolution."""

    def test_static_keys(self):
        """Test a key pair without a token selects static credentials."""
        auth = parse_auth({"access_key_id": "AKIA123", "secret_access_key": "secret"})
        assert auth == StaticCredentials("AKIA123", "secret")

    def test_static_keys_camel_case(self):
        """Test camelCase credential keys are accepted."""
        auth = parse_auth({"accessKeyId": "AKIA123", "secretAccessKey": "secret"})
        assert auth == StaticCredentials("AKIA123", "secret")

    def test_session_credentials(self):
        """Test a session token selects session credentials with all values."""
        auth = parse_auth({
            "accessKeyId": "ASIA123",
            "secretAccessKey": "secret",
            "sessionToken": "token",
        })
        assert isinstance(auth, SessionCredentials)
        assert auth.access_key_id == "ASIA123"
        assert auth.secret_access_key == "secret"
        assert auth.session_token == "token"

    def test_missing_access_key_id(self):
        """Test a credentials mapping without an access key id is rejected."""
        with pytest.raises(ConfigurationError, match="access_key_id"):
            parse_auth({"secret_access_key": "secret"})

    def test_missing_secret_access_key(self):
        """Test a credentials mapping without a secret key is rejected."""
        with pytest.raises(ConfigurationError, match="secret_access_key"):
            parse_auth({"access_key_id": "AKIA123"})

    @pytest.mark.parametrize("auth, field", [
        ({"access_key_id": 123, "secret_access_key": "secret"}, "auth.access_key_id"),
        ({"access_key_id": "AKIA123", "secret_access_key": b"secret"}, "auth.secret_access_key"),
        ({"access_key_id": "AKIA123", "secret_access_key": "secret", "session_token": 42},
         "auth.session_token"),
    ])
    def test_non_string_credentials_rejected(self, auth, field):
        """Test credential values must be strings."""
        with pytest.raises(ConfigurationError, match="must be a string") as exc_info:
            parse_auth(auth)
        assert exc_info.value.field == field

    def test_ecs_container_role(self):
        """Test the ECS_CONTAINER_ROLE tag selects the container role."""
        assert isinstance(parse_auth("ECS_CONTAINER_ROLE"), ContainerRole)

    @pytest.mark.parametrize("auth", [None, "EC2_IAM_ROLE", "SOMETHING_ELSE", "ecs_container_role"])
    def test_fallback_to_instance_profile(self, auth):
        """Test absent or unrecognized auth selects the instance profile role."""
        assert isinstance(parse_auth(auth), InstanceProfileRole)


@pytest.mark.config
class TestParseConnectionConfig:
    """Tests for parse_connection_config."""

    def test_full_settings(self):
        """Test region and auth are parsed together."""
        connection_config = parse_connection_config({
            "region": "us-west-2",
            "auth": {"access_key_id": "AKIA123", "secret_access_key": "secret"},
        })
        assert connection_config == ConnectionConfig(
            region="us-west-2",
            auth=StaticCredentials("AKIA123", "secret"),
        )
        assert connection_config.region_name == "us-west-2"

    def test_absent_auth(self):
        """Test settings without auth default to the instance profile role."""
        connection_config = parse_connection_config({"region": "us-east-1"})
        assert isinstance(connection_config.auth, InstanceProfileRole)

    def test_global_region_name_is_plain_string(self):
        """Test region_name unwraps global regions for boto3."""
        connection_config = parse_connection_config({"region": "aws-global"})
        assert connection_config.region is GlobalRegion.AWS_GLOBAL
        assert connection_config.region_name == "aws-global"
        assert type(connection_config.region_name) is str

    def test_immutable(self):
        """Test ConnectionConfig cannot be modified after construction."""
        connection_config = parse_connection_config({"region": "us-east-1"})
        with pytest.raises(Exception):
            connection_config.region = "eu-west-1"

    def test_non_mapping_settings(self):
        """Test non-mapping settings are a configuration error."""
        with pytest.raises(ConfigurationError):
            parse_connection_config("us-east-1")


@pytest.mark.config
class TestConfig:
    """Tests for Config class."""

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_defaults(self):
        """Test Config.from_env with nothing set."""
        config = Config.from_env()
        assert config.aws_region == 'us-east-1'
        assert config.access_key_id is None
        assert config.auth_type is None
        assert config.log_level == 'INFO'

    @patch.dict(os.environ, {
        'AWS_REGION': 'us-west-2',
        'SECRETS_MANAGER_REGION': 'eu-central-1',
        'SECRETS_MANAGER_AUTH': 'ECS_CONTAINER_ROLE',
        'LOG_LEVEL': 'debug',
    }, clear=True)
    def test_from_env_all_variables(self):
        """Test SECRETS_MANAGER_REGION wins over AWS_REGION."""
        config = Config.from_env()
        assert config.aws_region == 'eu-central-1'
        assert config.auth_type == 'ECS_CONTAINER_ROLE'
        assert config.log_level == 'DEBUG'

    @patch.dict(os.environ, {'AWS_REGION': 'us-west-2'}, clear=True)
    def test_from_env_aws_region_fallback(self):
        """Test AWS_REGION is used when SECRETS_MANAGER_REGION is unset."""
        assert Config.from_env().aws_region == 'us-west-2'

    @patch.dict(os.environ, {'SECRETS_MANAGER_ACCESS_KEY_ID': 'AKIA123'}, clear=True)
    def test_from_env_half_configured_keys(self):
        """Test an access key id without a secret key is rejected."""
        with pytest.raises(ConfigurationError, match="must be set together"):
            Config.from_env()

    @patch.dict(os.environ, {'LOG_LEVEL': 'INVALID'}, clear=True)
    def test_from_env_invalid_log_level(self):
        """Test Config.from_env raises error for invalid log level."""
        with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
            Config.from_env()

    @patch.dict(os.environ, {
        'SECRETS_MANAGER_ACCESS_KEY_ID': 'AKIA123',
        'SECRETS_MANAGER_SECRET_ACCESS_KEY': 'secret',
        'SECRETS_MANAGER_SESSION_TOKEN': 'token',
        'SECRETS_MANAGER_AUTH': 'ECS_CONTAINER_ROLE',
    }, clear=True)
    def test_to_connection_settings_static_keys(self):
        """Test static keys take precedence over the auth tag."""
        settings = Config.from_env().to_connection_settings()
        assert settings == {
            'region': 'us-east-1',
            'auth': {
                'access_key_id': 'AKIA123',
                'secret_access_key': 'secret',
                'session_token': 'token',
            },
        }
        assert isinstance(parse_connection_config(settings).auth, SessionCredentials)

    def test_to_connection_settings_auth_tag(self):
        """Test the auth tag is forwarded when no keys are configured."""
        config = Config(aws_region='us-west-1', auth_type='ECS_CONTAINER_ROLE')
        settings = config.to_connection_settings()
        assert settings == {'region': 'us-west-1', 'auth': 'ECS_CONTAINER_ROLE'}
        assert isinstance(parse_connection_config(settings).auth, ContainerRole)

    @patch.dict(os.environ, {}, clear=True)
    def test_get_config_singleton(self):
        """Test get_config returns singleton instance."""
        import config
        config._config = None

        config1 = get_config()
        config2 = get_config()

        assert config1 is config2
        config._config = None
