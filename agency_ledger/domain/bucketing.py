"""Time bucketing - groups dated ledger records by calendar month or year"""

from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Sequence, TypeVar

from agency_ledger.utils.date_utils import as_date, day_key, month_key, year_key

T = TypeVar("T")
K = TypeVar("K")


def bucket_by(records: Iterable[T], key_fn: Callable[[T], K]) -> Dict[K, List[T]]:
    """
    Fold records into buckets keyed by key_fn.

    Every record lands in exactly one bucket, in input order. Bucket keys
    appear in the order they were first encountered.
    """
    buckets: Dict[K, List[T]] = {}
    for record in records:
        buckets.setdefault(key_fn(record), []).append(record)
    return buckets


def bucket_by_month(records: Iterable[T], date_selector: Callable[[T], date]) -> Dict[str, List[T]]:
    """Group records under "YYYY-MM" keys derived from their logical date"""
    return bucket_by(records, lambda r: month_key(as_date(date_selector(r))))


def bucket_by_year(records: Iterable[T], date_selector: Callable[[T], date]) -> Dict[str, List[T]]:
    """Group records under "YYYY" keys derived from their logical date"""
    return bucket_by(records, lambda r: year_key(as_date(date_selector(r))))


def bucket_by_day(records: Iterable[T], date_selector: Callable[[T], date]) -> Dict[str, List[T]]:
    return bucket_by(records, lambda r: day_key(date_selector(r)))


def merge_buckets(buckets: Mapping[K, Sequence[T]]) -> List[T]:
    """Flatten buckets back into a single list (inverse of bucketing, up to order)"""
    return [record for key in buckets for record in buckets[key]]


def sorted_keys(buckets: Mapping[str, object], newest_first: bool = False) -> List[str]:
    """Zero-padded keys sort chronologically as plain strings"""
    return sorted(buckets, reverse=newest_first)
