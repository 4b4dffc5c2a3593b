"""
Request and response records for Secrets Manager operations.

Response records mirror the Secrets Manager response shapes field for
field. Secrets Manager omits fields that have no value, and those stay
``None`` here.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class VersionSelector:
    """Selects a secret version by id or by staging label, not both."""

    version_id: Optional[str] = None
    version_stage: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VersionSelector":
        return cls(
            version_id=data.get('version_id', data.get('versionId')),
            version_stage=data.get('version_stage', data.get('versionStage')),
        )


@dataclass(frozen=True)
class SecretFilter:
    """Filter applied to batch lookups, e.g. key 'name' or 'tag-key'."""

    key: str
    values: List[str]


@dataclass(frozen=True)
class BatchGetSecretValueRequest:
    """Up to 20 secret ids, or filters, for a batch lookup."""

    secret_ids: Optional[List[str]] = None
    filters: Optional[List[SecretFilter]] = None
    max_results: Optional[int] = None
    next_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BatchGetSecretValueRequest":
        raw_filters = data.get('filters')
        filters = None
        if raw_filters is not None:
            filters = [
                f if isinstance(f, SecretFilter) else SecretFilter(key=f['key'], values=list(f['values']))
                for f in raw_filters
            ]
        return cls(
            secret_ids=data.get('secret_ids', data.get('secretIds')),
            filters=filters,
            max_results=data.get('max_results', data.get('maxResults')),
            next_token=data.get('next_token', data.get('nextToken')),
        )


@dataclass(frozen=True)
class RotationRules:
    automatically_after_days: Optional[int] = None
    duration: Optional[str] = None
    schedule_expression: Optional[str] = None


@dataclass(frozen=True)
class Tag:
    key: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class ReplicationStatus:
    region: Optional[str] = None
    kms_key_id: Optional[str] = None
    status: Optional[str] = None
    status_message: Optional[str] = None
    last_accessed_date: Optional[datetime] = None


@dataclass(frozen=True)
class SecretDescription:
    """Secret metadata returned by describe-secret; never the secret value."""

    arn: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    kms_key_id: Optional[str] = None
    rotation_enabled: Optional[bool] = None
    rotation_lambda_arn: Optional[str] = None
    rotation_rules: Optional[RotationRules] = None
    last_rotated_date: Optional[datetime] = None
    last_changed_date: Optional[datetime] = None
    last_accessed_date: Optional[datetime] = None
    deleted_date: Optional[datetime] = None
    next_rotation_date: Optional[datetime] = None
    tags: Optional[List[Tag]] = None
    version_ids_to_stages: Optional[Dict[str, List[str]]] = None
    owning_service: Optional[str] = None
    created_date: Optional[datetime] = None
    primary_region: Optional[str] = None
    replication_status: Optional[List[ReplicationStatus]] = None


@dataclass(frozen=True)
class SecretValue:
    """Decrypted secret value and the version it came from."""

    arn: Optional[str] = None
    name: Optional[str] = None
    version_id: Optional[str] = None
    secret_binary: Optional[bytes] = None
    secret_string: Optional[str] = None
    version_stages: Optional[List[str]] = None
    created_date: Optional[datetime] = None


@dataclass(frozen=True)
class SecretValueError:
    """Per-secret failure reported inside a batch response."""

    secret_id: Optional[str] = None
    error_code: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class BatchSecretValue:
    secret_values: List[SecretValue]
    errors: List[SecretValueError]
    next_token: Optional[str] = None
