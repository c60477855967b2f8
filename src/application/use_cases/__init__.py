"""Application use cases package."""

from .account_ledger import AccountLedger
from .family_directory import FamilyDirectory
from .invitation_workflow import InvitationWorkflow
from .sign_in import SignInUseCase
from .snapshot_recorder import SnapshotRecorder
from .workspace_reset import WorkspaceResetUseCase

__all__ = [
    "AccountLedger",
    "FamilyDirectory",
    "InvitationWorkflow",
    "SignInUseCase",
    "SnapshotRecorder",
    "WorkspaceResetUseCase",
]
