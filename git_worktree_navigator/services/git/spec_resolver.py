"""Turn free text ("branch name" or pull request URL) into a creation plan."""

import re
from pathlib import Path, PurePosixPath
from typing import Callable, List, Optional, Tuple

from git_worktree_navigator.constants import FALLBACK_PATH_SEGMENT
from git_worktree_navigator.exceptions import AmbiguousRemoteError, ExternalToolError
from git_worktree_navigator.logging_config import get_logger
from git_worktree_navigator.models.plan import BranchSource, CreationPlan, SourceKind
from git_worktree_navigator.models.repo import RepoContext
from git_worktree_navigator.services.git.queries import GitQueries

logger = get_logger(__name__)

# https://github.com/OWNER/REPO/pull/123 (optionally followed by /files, ?query or #fragment)
PULL_REQUEST_URL = re.compile(
    r"^https?://[^/\s]+/(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+)/pull/(?P<number>\d+)(?:[/?#]\S*)?$"
)

_UNSAFE_PATH_CHARS = re.compile(r"[^A-Za-z0-9._-]")

# (label, candidates) -> chosen candidate
RemoteChooser = Callable[[str, List[str]], str]


def sanitize_branch_for_path(branch: str) -> PurePosixPath:
    """Map a branch name to a filesystem-safe relative path.

    Splits on "/", drops empty segments and replaces anything outside
    ``[A-Za-z0-9._-]`` with "-". An empty result becomes ``branch``.

    >>> sanitize_branch_for_path("feat/my thing!")
    PurePosixPath('feat/my-thing-')
    """
    segments = [_UNSAFE_PATH_CHARS.sub("-", seg) for seg in branch.split("/") if seg]
    if not segments:
        segments = [FALLBACK_PATH_SEGMENT]
    return PurePosixPath(*segments)


def parse_pull_request_url(text: str) -> Optional[Tuple[str, str, int]]:
    """Return ``(owner, repo, number)`` for a pull request URL, else None."""
    match = PULL_REQUEST_URL.match(text.strip())
    if not match:
        return None
    repo = match.group("repo")
    if repo.endswith(".git"):
        repo = repo[:-len(".git")]
    return match.group("owner"), repo, int(match.group("number"))


class SpecResolver:
    """Resolve a branch name or pull request URL for one repository.

    The resolver only reads: branch existence checks and remote enumeration.
    Fetching and branch creation belong to the creation service.
    """

    def __init__(
        self,
        repo: RepoContext,
        queries: GitQueries,
        worktrees_dir: Callable[[], Path],
        choose_remote: Optional[RemoteChooser] = None,
    ):
        """Initialize the resolver.

        Args:
            repo: Repository the worktree will belong to
            queries: Read-only git queries for ``repo``
            worktrees_dir: Returns the repository's worktrees directory, resolving it if needed
            choose_remote: Asks the user to pick among several remotes; without it,
                several candidates raise AmbiguousRemoteError
        """
        self.repo = repo
        self.queries = queries
        self.worktrees_dir = worktrees_dir
        self.choose_remote = choose_remote

    def resolve(self, spec_text: str, explicit_base: Optional[str] = None) -> CreationPlan:
        """Resolve ``spec_text`` into a plan.

        Raises:
            ValueError: ``spec_text`` is blank
            AmbiguousRemoteError: several remotes qualify and nobody chose
            ExternalToolError: a pull request was given but no remote exists
        """
        spec = spec_text.strip()
        if not spec:
            raise ValueError("empty branch name")

        pull_request = parse_pull_request_url(spec)
        if pull_request is not None:
            owner, repo_name, number = pull_request
            branch = f"pr/{number}"
            remote = self._pull_request_remote(owner, repo_name, branch)
            source = BranchSource.pull_request(number, remote)
            base = None
        else:
            branch = spec
            source = self._classify_branch(branch)
            base = None
            if source.kind is SourceKind.NEW and explicit_base and explicit_base.strip():
                base = explicit_base.strip()

        plan = CreationPlan(
            repo=self.repo,
            branch=branch,
            source=source,
            destination=self.destination_for(branch),
            base=base,
        )
        logger.info(f"Resolved '{spec}' to {plan.branch} [{plan.source}] at {plan.destination}")
        return plan

    def destination_for(self, branch: str) -> Path:
        return Path(self.worktrees_dir()) / sanitize_branch_for_path(branch)

    def _classify_branch(self, branch: str) -> BranchSource:
        # Existing local state is trusted as-is; no remote is consulted
        if self.queries.local_branch_exists(branch):
            return BranchSource.existing_local()

        candidates = self.queries.remotes_with_branch(branch)
        if not candidates:
            return BranchSource.new()
        return BranchSource.existing_remote(self._pick(branch, candidates))

    def _pull_request_remote(self, owner: str, repo_name: str, branch: str) -> str:
        remotes = self.queries.list_remotes()
        if not remotes:
            raise ExternalToolError("fetch", "no remote configured to fetch the pull request from")
        if len(remotes) == 1:
            return remotes[0]

        slug = f"{owner}/{repo_name}".lower()
        matching = [
            r for r in remotes
            if slug in (self.queries.remote_url(r) or "").lower()
        ]
        if len(matching) == 1:
            return matching[0]
        return self._pick(branch, matching or remotes)

    def _pick(self, branch: str, candidates: List[str]) -> str:
        if len(candidates) == 1:
            return candidates[0]
        if self.choose_remote is None:
            raise AmbiguousRemoteError(branch, candidates)
        chosen = self.choose_remote(f"Which remote for '{branch}'?", candidates)
        if chosen not in candidates:
            raise AmbiguousRemoteError(branch, candidates)
        return chosen
