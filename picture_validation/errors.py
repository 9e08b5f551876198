class UploadError(Exception):
    """Base for every failure the upload handler turns into a response."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(UploadError):
    pass


class ConfigurationError(UploadError):
    pass


class ContentPolicyError(UploadError):
    pass


class EmptyUploadError(UploadError):
    status_code = 400


class UpstreamError(UploadError):
    pass
