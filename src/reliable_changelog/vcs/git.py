"""Git operations via subprocess.

Read-only commands always run. Commands that change the repository or the
remote are recorded in ``commands_run`` and skipped in dry-run mode.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from reliable_changelog.config.models import ExecutionMode
from reliable_changelog.exceptions import GitError, PushError

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"]) + _RECORD_SEP


@dataclass(frozen=True)
class Commit:
    """A commit read from the log."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime

    @property
    def subject(self) -> str:
        return self.message.split("\n", 1)[0].strip()

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


class GitRepository:
    """Thin wrapper around the git command line for one working tree."""

    def __init__(self, path: Path | None = None, mode: ExecutionMode = ExecutionMode.LIVE) -> None:
        self.path = (path or Path.cwd()).resolve()
        self.mode = mode
        self.commands_run: list[str] = []

    def _run(self, *args: str) -> str:
        """Run a read-only git command and return its stdout."""
        command = ["git", *args]
        logger.debug("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=True,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found", command=" ".join(command)) from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f'Command "{" ".join(command)}" exited with code {e.returncode}.',
                command=" ".join(command),
                stderr=e.stderr or "",
            ) from e
        return result.stdout

    def _execute(self, *args: str) -> str:
        """Run a mutating git command, honouring the execution mode."""
        full_command = " ".join(["git", *args])
        self.commands_run.append(full_command)

        if self.mode is ExecutionMode.DRY_RUN:
            logger.info('Skipping "%s" in dry-run mode', full_command)
            return ""

        return self._run(*args)

    # -------------------------------------------------------------------------
    # Read operations
    # -------------------------------------------------------------------------

    def is_shallow(self) -> bool:
        if self.mode is ExecutionMode.DRY_RUN:
            return False
        return self._run("rev-parse", "--is-shallow-repository").strip() == "true"

    def get_tags(self, pattern: str = "*") -> list[str]:
        """Return tag names matching a glob pattern."""
        output = self._run("tag", "--list", pattern)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def get_commits(self, since_ref: str | None = None, path: str | None = None) -> list[Commit]:
        """Return commits reachable from HEAD, newest first.

        Args:
            since_ref: Exclude commits reachable from this ref
            path: Only include commits touching this path
        """
        args = ["log", f"--format={_LOG_FORMAT}"]
        args.append(f"{since_ref}..HEAD" if since_ref else "HEAD")
        if path:
            args.extend(["--", path])

        try:
            output = self._run(*args)
        except GitError as e:
            # A repository without commits has no HEAD to log from.
            if "does not have any commits" in e.stderr or "unknown revision" in e.stderr:
                return []
            raise

        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, author_name, author_email, date, message = record.split(_FIELD_SEP, 4)
            commits.append(
                Commit(
                    sha=sha,
                    message=message.strip(),
                    author_name=author_name,
                    author_email=author_email,
                    date=datetime.fromisoformat(date),
                )
            )
        return commits

    # -------------------------------------------------------------------------
    # Side effects
    # -------------------------------------------------------------------------

    def config(self, prop: str, value: str) -> None:
        self._execute("config", prop, value)

    def add(self, pathspec: str = ".") -> None:
        self._execute("add", pathspec)

    def commit(self, message: str, *, allow_empty: bool = False) -> None:
        """Commit the index; allow_empty records a commit even with nothing staged."""
        args = ["commit"]
        if allow_empty:
            args.append("--allow-empty")
        self._execute(*args, "-m", message)

    def pull(self, pull_method: str = "--ff-only") -> None:
        """Pull from the remote, fetching full history and tags."""
        args = ["pull"]
        if self.is_shallow():
            args.append("--unshallow")
        args.append("--tags")
        if pull_method:
            args.append(pull_method)
        self._execute(*args)

    def create_tag(self, tag: str) -> None:
        """Create an annotated tag whose message is the tag name."""
        self._execute("tag", "-a", tag, "-m", tag)

    def push(self, branch: str) -> None:
        """Push the branch and its annotated tags to origin.

        Raises:
            PushError: If the push fails
        """
        try:
            self._execute("push", "origin", branch, "--follow-tags")
        except GitError as e:
            raise PushError(e.args[0], command=e.command, stderr=e.stderr) from e
