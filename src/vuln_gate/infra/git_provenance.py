from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Optional

from git import Repo
from git.exc import GitError, InvalidGitRepositoryError, NoSuchPathError

from ..core.domain.exceptions import ProvenanceError
from ..core.domain.models import CommitInventory
from ..core.ports import LoggerPort


def _location(path: PurePosixPath) -> str:
    return str(path) if str(path) else "."


class GitRepoExtractor:
    """Extracts the HEAD commit of a repository and the commits its submodules pin.

    Only fails when the repository itself cannot be opened; anything that goes
    wrong afterwards just yields fewer entries.
    """

    def __init__(
        self,
        *,
        include_root_git: bool = True,
        disabled: bool = False,
        logger: Optional[LoggerPort] = None,
    ) -> None:
        self.include_root_git = include_root_git
        self.disabled = disabled
        self._logger = logger

    def file_required(self, path: Path) -> bool:
        if self.disabled:
            return False
        if path.name != ".git":
            return False
        # stat only after the cheap name check
        return path.is_dir()

    def extract(self, root: Path, path: Path) -> list[CommitInventory]:
        if self.disabled:
            return []

        # `path` is the .git directory relative to root; GitPython wants the worktree
        worktree = PurePosixPath(Path(path).parent.as_posix())
        try:
            repo = Repo(Path(root) / Path(path).parent)
        except (InvalidGitRepositoryError, NoSuchPathError, GitError) as e:
            raise ProvenanceError(Path(root) / path, e) from e

        inventories: list[CommitInventory] = []
        try:
            if self.include_root_git:
                commit = self._head_commit(repo)
                if commit is not None:
                    inventories.append(CommitInventory(commit=commit, location=_location(worktree)))

            try:
                submodules = list(repo.submodules)
            except (GitError, ValueError, OSError) as e:
                if self._logger is not None:
                    self._logger.warning(
                        f"could not list submodules of {_location(worktree)}: {e}",
                        path=_location(worktree),
                    )
                return inventories

            for sm in submodules:
                try:
                    commit = sm.hexsha
                    sub_path = sm.path
                except (GitError, ValueError, OSError):
                    continue
                inventories.append(
                    CommitInventory(commit=commit, location=_location(worktree / sub_path))
                )
        finally:
            repo.close()

        return inventories

    @staticmethod
    def _head_commit(repo: Repo) -> Optional[str]:
        # An empty repository has no HEAD commit; that is not an error
        try:
            return repo.head.commit.hexsha
        except (ValueError, GitError):
            return None
