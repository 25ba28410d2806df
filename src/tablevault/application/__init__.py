"""Application layer - use cases and orchestration.

The application layer wires domain services and adapters into the
public store: the single-flight mutation queue, the migration tracker
and the VaultStore facade.
"""

from tablevault.application.migration_tracker import MigrationTracker
from tablevault.application.mutation_queue import MutationQueue
from tablevault.application.vault_store import VaultStore

__all__ = [
    "MigrationTracker",
    "MutationQueue",
    "VaultStore",
]
