"""Domain services for business logic.

Services implement the rules that don't belong to a single entity:
predicate matching and the schema/record operations applied to a
StoreState between reload and persist.
"""

from tablevault.domain.services import table_operations
from tablevault.domain.services.query_matcher import filter_records, matches, reject_records
from tablevault.domain.services.table_operations import normalize_record, require_table

__all__ = [
    "table_operations",
    "matches",
    "filter_records",
    "reject_records",
    "normalize_record",
    "require_table",
]
