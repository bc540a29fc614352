"""
Generation error taxonomy.

- Advisory-degrade: parse failures in analysis/script paths, handled inside the
  client (never raised).
- Per-item: NoArtifactError / backend exceptions, recorded on the job.
- Credential: backend message matching CREDENTIAL_ERROR_SIGNATURE.
- Total failure: a batch that produced nothing.
"""

from utils.constants import CREDENTIAL_ERROR_SIGNATURE


class GenerationError(Exception):
    """Base class for generation failures."""


class NoArtifactError(GenerationError):
    """The backend answered but produced no image/video."""


class PollTimeoutError(GenerationError):
    """A bounded RetryPolicy ran out before the operation reported done."""


class CredentialError(GenerationError):
    """No usable credential could be obtained."""


class NoEligibleScenesError(GenerationError, ValueError):
    """Every storyboard scene is missing its image."""


class TotalFailureError(GenerationError):
    """A batch run finished with zero artifacts."""

    def __init__(self, message: str, run=None):
        super().__init__(message)
        self.run = run


def is_credential_error(exc: BaseException) -> bool:
    """
    Backend reports a missing/invalid key as "Requested entity was not found".

    Matching on message text is the only contract the backend offers today.
    """
    return CREDENTIAL_ERROR_SIGNATURE in str(exc)
