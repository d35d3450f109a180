"""Deduplicates call-site observations into a deterministic package listing."""

from __future__ import annotations

from typing import Dict, Iterable, List

from .models import AggregateResult, FunctionSignature, PackageBucket, SymbolObservation

_TABLE_HEADER = ("Package Name", "Path", "Func", "Return")


class Aggregator:
    """Groups observations by package path and orders the result.

    The output depends only on the set of observations: buckets are sorted by
    path and signatures by function name, both with plain string comparison.
    When one function name is seen with two return types the first one wins.
    """

    def aggregate(self, observations: Iterable[SymbolObservation]) -> AggregateResult:
        buckets: Dict[str, PackageBucket] = {}
        for observation in observations:
            bucket = buckets.get(observation.package_path)
            if bucket is None:
                bucket = PackageBucket(
                    path=observation.package_path,
                    short_name=observation.package_short_name,
                )
                buckets[observation.package_path] = bucket
            if bucket.has_function(observation.function_name):
                continue
            bucket.signatures.append(
                FunctionSignature(
                    name=observation.function_name,
                    return_type_name=observation.return_type_name,
                )
            )
        return sort_buckets(buckets.values())


def sort_buckets(buckets: Iterable[PackageBucket]) -> AggregateResult:
    """Sort signatures within each bucket, then the buckets by path."""
    ordered: List[PackageBucket] = []
    for bucket in buckets:
        bucket.signatures.sort(key=lambda signature: signature.name)
        ordered.append(bucket)
    ordered.sort(key=lambda bucket: bucket.path)
    return ordered


def format_package_table(packages: AggregateResult) -> str:
    """Render the aggregated packages as an aligned text table for debugging."""
    rows: List[tuple[str, str, str, str]] = [_TABLE_HEADER]
    for bucket in packages:
        for signature in bucket.signatures:
            rows.append((bucket.short_name, bucket.path, signature.name, signature.return_type_name))

    widths = [max(len(row[column]) for row in rows) for column in range(len(_TABLE_HEADER))]
    lines = []
    for row in rows:
        cells = [value.ljust(width) for value, width in zip(row, widths)]
        lines.append("  ".join(cells).rstrip())
    return "\n".join(lines)


__all__ = ["Aggregator", "format_package_table", "sort_buckets"]
