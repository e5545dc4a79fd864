"""
Error taxonomy for profile asset operations.

Every error carries a stable machine-readable ``kind`` and a human message.
Route handlers never build error bodies themselves - the exception handler
registered in main.py renders all of these the same way:

    {"success": false, "error": {"kind": "...", "message": "..."}}

NotFound and Unauthorized share that exact shape so a caller cannot tell
"belongs to someone else" apart from "does not exist".
"""

from typing import Optional


class ProfileAssetError(Exception):
    """Base class for errors surfaced to API callers."""

    kind: str = "error"
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(ProfileAssetError):
    kind = "validation_error"
    status_code = 400
    default_message = "Invalid request"


class InvalidFileType(ProfileAssetError):
    kind = "invalid_file_type"
    status_code = 415
    default_message = "File type is not allowed"


class FileTooLarge(ProfileAssetError):
    kind = "file_too_large"
    status_code = 413
    default_message = "File is too large"


class NotFound(ProfileAssetError):
    kind = "not_found"
    status_code = 404
    default_message = "Resource not found"


class Unauthorized(ProfileAssetError):
    kind = "unauthorized"
    status_code = 401
    default_message = "Unauthorized"


class StorageError(ProfileAssetError):
    kind = "storage_error"
    status_code = 502
    default_message = "File storage failed"


class ConcurrentUpdateError(ProfileAssetError):
    """Raised when the stored profile version moved under a write."""

    kind = "concurrent_update"
    status_code = 409
    default_message = "Profile was modified concurrently, please retry"


class SyncWarning(UserWarning):
    """
    Non-fatal condition: a best-effort object delete or an Account/Profile
    synchronization step failed. Logged only, never raised to callers.
    """
