"""Services for git-worktree-navigator."""

from .creation_service import CreationService
from .hook_service import HookService
from .registry_service import RegistryService

__all__ = ["CreationService", "HookService", "RegistryService"]
