class TrackMyJobError(Exception):
    pass


class AuthenticationError(TrackMyJobError):
    pass


class InvalidTokenError(AuthenticationError):
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class AuthServiceError(AuthenticationError):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(f"Auth service error: {message}")


class UploadValidationError(TrackMyJobError):
    status_code = 400


class EmptyFileError(UploadValidationError):
    def __init__(self):
        super().__init__("Uploaded file is empty")


class UnsupportedFileTypeError(UploadValidationError):
    def __init__(self, content_type: str | None, allowed_types: frozenset[str]):
        self.content_type = content_type
        self.allowed_types = allowed_types
        super().__init__(
            f"Unsupported file type: {content_type or 'unknown'}. "
            f"Allowed: {', '.join(sorted(allowed_types))}"
        )


class FileTooLargeError(UploadValidationError):
    status_code = 413

    def __init__(self, size: int, max_bytes: int):
        self.size = size
        self.max_bytes = max_bytes
        super().__init__(f"File size {size} bytes exceeds limit of {max_bytes} bytes")


class StorageError(TrackMyJobError):
    pass
