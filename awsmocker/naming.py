"""Display names for generated service mocks."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Mapping

# Package short names whose proper spelling cannot be recovered by title casing.
DEFAULT_SERVICE_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "acm": "ACM",
        "cloudformation": "CloudFormation",
        "cloudfront": "CloudFront",
        "cloudwatch": "CloudWatch",
        "cloudwatchlogs": "CloudWatchLogs",
        "dynamodb": "DynamoDB",
        "ec2": "EC2",
        "ecr": "ECR",
        "ecs": "ECS",
        "eks": "EKS",
        "elasticache": "ElastiCache",
        "eventbridge": "EventBridge",
        "iam": "IAM",
        "kms": "KMS",
        "rds": "RDS",
        "route53": "Route53",
        "s3": "S3",
        "secretsmanager": "SecretsManager",
        "sfn": "SFN",
        "sns": "SNS",
        "sqs": "SQS",
        "ssm": "SSM",
        "sts": "STS",
    }
)


class NamingResolver:
    """Maps package short names to the names used in generated code."""

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        merged: Dict[str, str] = dict(DEFAULT_SERVICE_NAMES)
        if overrides:
            merged.update(overrides)
        self._overrides: Mapping[str, str] = MappingProxyType(merged)

    def to_title(self, name: str) -> str:
        """Return the override for ``name`` or its English title-cased form."""
        override = self._overrides.get(name)
        if override is not None:
            return override
        return title_case(name)

    def template_helpers(self) -> Dict[str, Callable[[str], str]]:
        """Helpers exposed to the template under their template names."""
        return {
            "ToTitle": self.to_title,
            "FirstCharLower": first_char_lower,
            "LowerCaseFirst": lower_case_first,
        }


def title_case(name: str) -> str:
    """Title-case each whitespace separated word, lowering the remainder.

    Digits do not start a new word, so ``ec2instance`` becomes ``Ec2instance``.
    """
    return " ".join(word.capitalize() for word in name.split(" "))


def first_char_lower(name: str) -> str:
    """First character of ``name``, lower-cased. Used for receiver names."""
    return name[:1].lower()


def lower_case_first(name: str) -> str:
    """``name`` with only its first character lower-cased."""
    if not name:
        return name
    return name[0].lower() + name[1:]


__all__ = [
    "DEFAULT_SERVICE_NAMES",
    "NamingResolver",
    "first_char_lower",
    "lower_case_first",
    "title_case",
]
