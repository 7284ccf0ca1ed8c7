from __future__ import annotations

import asyncio
from pathlib import Path

from rulecheck.core.result import Err, GitError, Ok, Result

DEFAULT_TIMEOUT = 10.0


async def _run_git(cwd: Path, *args: str, timeout: float = DEFAULT_TIMEOUT) -> Result[str, GitError]:
    """Run git with asyncio and return stdout as text, wrapping failures."""
    if not cwd.exists():
        return Err(GitError("Repository path does not exist", context={"cwd": str(cwd)}))

    try:
        process = await asyncio.create_subprocess_exec(
            "git",
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL,
            cwd=cwd,
        )
    except FileNotFoundError:
        return Err(GitError("git executable not found on PATH", context={"cwd": str(cwd)}))
    except OSError as exc:
        return Err(
            GitError(
                "Failed to start git",
                context={"cwd": str(cwd), "args": list(args), "error": str(exc)},
            )
        )

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return Err(
            GitError(
                f"git {' '.join(args)} timed out after {timeout:g}s",
                context={"cwd": str(cwd)},
            )
        )

    if process.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip()
        stdout_text = stdout.decode("utf-8", errors="replace").strip()
        detail = message or stdout_text or f"git {' '.join(args)} failed"
        return Err(
            GitError(
                detail,
                context={"cwd": str(cwd), "args": list(args), "returncode": process.returncode},
            )
        )

    return Ok(stdout.decode("utf-8", errors="replace"))


async def repo_root(cwd: Path, timeout: float = DEFAULT_TIMEOUT) -> Result[Path, GitError]:
    """Return the top-level directory of the repository containing cwd."""
    match await _run_git(cwd, "rev-parse", "--show-toplevel", timeout=timeout):
        case Err(err):
            return Err(err)
        case Ok(output):
            return Ok(Path(output.strip()))


async def current_branch(cwd: Path, timeout: float = DEFAULT_TIMEOUT) -> Result[str, GitError]:
    """Return the checked-out branch name (``HEAD`` when detached)."""
    match await _run_git(cwd, "rev-parse", "--abbrev-ref", "HEAD", timeout=timeout):
        case Err(err):
            return Err(err)
        case Ok(output):
            return Ok(output.strip())


async def staged_files(cwd: Path, timeout: float = DEFAULT_TIMEOUT) -> Result[list[Path], GitError]:
    """List files staged for commit (added, copied, modified or renamed)."""
    match await _run_git(
        cwd, "diff", "--cached", "--name-only", "--diff-filter=ACMR", "-z", timeout=timeout
    ):
        case Err(err):
            return Err(err)
        case Ok(output):
            return Ok([Path(item) for item in output.split("\0") if item])


__all__ = [
    "DEFAULT_TIMEOUT",
    "current_branch",
    "repo_root",
    "staged_files",
]
