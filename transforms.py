"""
Conversions between native records and boto3 Secrets Manager payloads.

Request builders return the keyword arguments for the boto3 call and only
include fields that are set. Response converters read the boto3 response
dict and leave absent fields as ``None``.
"""
import base64
import dataclasses
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union
from models import (
    BatchGetSecretValueRequest,
    BatchSecretValue,
    ReplicationStatus,
    RotationRules,
    SecretDescription,
    SecretValue,
    SecretValueError,
    Tag,
    VersionSelector,
)


def _require_secret_id(secret_id: Any) -> str:
    if not isinstance(secret_id, str) or not secret_id:
        raise ValueError(f'secret_id must be a non-empty string, got: {secret_id!r}')
    return secret_id


def describe_secret_request(secret_id: str) -> Dict[str, Any]:
    return {'SecretId': _require_secret_id(secret_id)}


def get_secret_value_request(
    secret_id: str,
    version_selector: Optional[Union[VersionSelector, Mapping[str, Any]]] = None
) -> Dict[str, Any]:
    """
    Build kwargs for ``get_secret_value``.

    Both version fields are forwarded as given; Secrets Manager rejects a
    request that sets both.
    """
    request = {'SecretId': _require_secret_id(secret_id)}
    if version_selector is None:
        return request
    if isinstance(version_selector, Mapping):
        version_selector = VersionSelector.from_dict(version_selector)
    if not isinstance(version_selector, VersionSelector):
        raise ValueError(
            f'version_selector must be a VersionSelector or mapping, got: {type(version_selector).__name__}'
        )
    if version_selector.version_id is not None:
        request['VersionId'] = version_selector.version_id
    if version_selector.version_stage is not None:
        request['VersionStage'] = version_selector.version_stage
    return request


def batch_get_secret_value_request(
    batch_request: Union[BatchGetSecretValueRequest, Mapping[str, Any]]
) -> Dict[str, Any]:
    """Build kwargs for ``batch_get_secret_value``; the 20 id cap is left to the service."""
    if isinstance(batch_request, Mapping):
        batch_request = BatchGetSecretValueRequest.from_dict(batch_request)
    if not isinstance(batch_request, BatchGetSecretValueRequest):
        raise ValueError(
            f'request must be a BatchGetSecretValueRequest or mapping, got: {type(batch_request).__name__}'
        )

    request: Dict[str, Any] = {}
    if batch_request.secret_ids is not None:
        request['SecretIdList'] = list(batch_request.secret_ids)
    if batch_request.filters is not None:
        request['Filters'] = [
            {'Key': f.key, 'Values': list(f.values)} for f in batch_request.filters
        ]
    if batch_request.max_results is not None:
        request['MaxResults'] = batch_request.max_results
    if batch_request.next_token is not None:
        request['NextToken'] = batch_request.next_token
    return request


def _rotation_rules(data: Optional[Dict[str, Any]]) -> Optional[RotationRules]:
    if data is None:
        return None
    return RotationRules(
        automatically_after_days=data.get('AutomaticallyAfterDays'),
        duration=data.get('Duration'),
        schedule_expression=data.get('ScheduleExpression'),
    )


def _tags(data: Optional[List[Dict[str, Any]]]) -> Optional[List[Tag]]:
    if data is None:
        return None
    return [Tag(key=t.get('Key'), value=t.get('Value')) for t in data]


def _replication_status(data: Optional[List[Dict[str, Any]]]) -> Optional[List[ReplicationStatus]]:
    if data is None:
        return None
    return [
        ReplicationStatus(
            region=r.get('Region'),
            kms_key_id=r.get('KmsKeyId'),
            status=r.get('Status'),
            status_message=r.get('StatusMessage'),
            last_accessed_date=r.get('LastAccessedDate'),
        )
        for r in data
    ]


def to_secret_description(response: Dict[str, Any]) -> SecretDescription:
    return SecretDescription(
        arn=response.get('ARN'),
        name=response.get('Name'),
        description=response.get('Description'),
        kms_key_id=response.get('KmsKeyId'),
        rotation_enabled=response.get('RotationEnabled'),
        rotation_lambda_arn=response.get('RotationLambdaARN'),
        rotation_rules=_rotation_rules(response.get('RotationRules')),
        last_rotated_date=response.get('LastRotatedDate'),
        last_changed_date=response.get('LastChangedDate'),
        last_accessed_date=response.get('LastAccessedDate'),
        deleted_date=response.get('DeletedDate'),
        next_rotation_date=response.get('NextRotationDate'),
        tags=_tags(response.get('Tags')),
        version_ids_to_stages=response.get('VersionIdsToStages'),
        owning_service=response.get('OwningService'),
        created_date=response.get('CreatedDate'),
        primary_region=response.get('PrimaryRegion'),
        replication_status=_replication_status(response.get('ReplicationStatus')),
    )


def to_secret_value(response: Dict[str, Any]) -> SecretValue:
    return SecretValue(
        arn=response.get('ARN'),
        name=response.get('Name'),
        version_id=response.get('VersionId'),
        secret_binary=response.get('SecretBinary'),
        secret_string=response.get('SecretString'),
        version_stages=response.get('VersionStages'),
        created_date=response.get('CreatedDate'),
    )


def to_batch_secret_value(response: Dict[str, Any]) -> BatchSecretValue:
    return BatchSecretValue(
        secret_values=[to_secret_value(v) for v in response.get('SecretValues', [])],
        errors=[
            SecretValueError(
                secret_id=e.get('SecretId'),
                error_code=e.get('ErrorCode'),
                message=e.get('Message'),
            )
            for e in response.get('Errors', [])
        ],
        next_token=response.get('NextToken'),
    )


def _json_safe(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode('ascii')
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


def to_json_dict(record: Any) -> Dict[str, Any]:
    """
    Render a response record as a JSON-serializable dict.

    Datetimes become ISO-8601 strings and binary values become base64
    text. ``None`` fields are dropped so absent fields stay absent.
    """
    raw = dataclasses.asdict(record)
    return _json_safe(_drop_none(raw))


def _drop_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(v) for v in value]
    return value
