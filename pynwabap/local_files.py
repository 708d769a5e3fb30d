"""Selection of local files to deploy, by glob pattern or git changes."""

import glob
import logging
import subprocess
from pathlib import Path

from .exceptions import LocalFilesError

logger = logging.getLogger(__name__)


def find_files(
    base_dir: Path, pattern: str = "**", include_dot_files: bool = False
) -> list[str]:
    """Find files below a directory matching a glob pattern.

    Args:
        base_dir: Directory to search
        pattern: Glob pattern relative to ``base_dir`` (``**`` matches any depth)
        include_dot_files: Whether names starting with a dot can match

    Returns:
        Sorted relative paths using forward slashes

    Examples:
        >>> find_files(Path("webapp"), "**/*.js")
        ['Component.js', 'controller/App.controller.js']
    """
    if not base_dir.is_dir():
        raise LocalFilesError(f"Base directory does not exist: {base_dir}")

    matches = glob.glob(
        pattern,
        root_dir=base_dir,
        recursive=True,
        include_hidden=include_dot_files,
    )
    files = sorted(
        Path(match).as_posix() for match in matches if (base_dir / match).is_file()
    )
    logger.debug("Pattern %s matched %d file(s) in %s", pattern, len(files), base_dir)
    return files


def git_changed_files(
    base_dir: Path,
    pattern: str,
    commit: str,
    include_unstaged: bool = False,
) -> list[str]:
    """List files changed since a commit, including deleted ones.

    Deleted files are reported as well so that the sync engine can remove
    them from the server.

    Args:
        base_dir: Directory inside the work tree; results are relative to it
        pattern: Pathspec restricting the files considered
        commit: Commit, branch or reference to compare the work tree with
        include_unstaged: Also include files with uncommitted changes

    Returns:
        Relative paths using forward slashes, without duplicates
    """
    files: dict[str, None] = {}

    if include_unstaged:
        # Short status with -z prints paths relative to the work tree root
        prefix = _run_git(base_dir, ["rev-parse", "--show-prefix"]).strip()
        stdout = _run_git(base_dir, ["status", "--short", "-z", "-u", "--", pattern])
        entries = iter(stdout.split("\0"))
        for entry in entries:
            if len(entry) < 4:
                continue
            # "XY path": Y is the work tree status
            status, path = entry[:2], entry[3:]
            if "R" in status or "C" in status:
                # Source path of a rename or copy follows as its own field
                next(entries, None)
            if status[1] != " " and path.startswith(prefix):
                files[path[len(prefix) :]] = None

    stdout = _run_git(
        base_dir,
        [
            "diff",
            "-r",
            "-z",
            "--name-status",
            "--no-renames",
            "--relative",
            commit,
            "--",
            pattern,
        ],
    )
    fields = stdout.split("\0")
    for _status, path in zip(fields[0::2], fields[1::2]):
        if path:
            files[path] = None

    logger.debug("git reported %d changed file(s) since %s", len(files), commit)
    return list(files)


def _run_git(base_dir: Path, args: list[str]) -> str:
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=base_dir,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise LocalFilesError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        raise LocalFilesError(f"git {args[0]} failed: {e.stderr.strip()}") from e
    return completed.stdout
