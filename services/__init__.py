"""
Service layer for AWS Secrets Manager access.

This package wraps credential selection and the boto3 client so callers
only deal with native settings and response records.
"""
