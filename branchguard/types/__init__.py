"""branchguard type definitions.

This module exports all data model types used by the client.
"""

from branchguard.types.branches import Branch
from branchguard.types.protection import BranchProtectionRule, CleanupReport

__all__ = [
    "Branch",
    "BranchProtectionRule",
    "CleanupReport",
]
