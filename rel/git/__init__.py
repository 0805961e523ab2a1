"""Git operations for the release pipeline.

    from rel.git import Repository

    repo = Repository(Path("/path/to/crate"))
    sha = repo.head_sha()
"""

from .repository import GitError, Repository

__all__ = ["GitError", "Repository"]
