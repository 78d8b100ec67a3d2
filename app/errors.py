"""Error taxonomy shared by the services and the HTTP error boundary.

Services raise these; ``app.main`` turns every one of them into a
``{"message": ...}`` JSON body with the matching status code.
"""


class QuillError(Exception):
    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(QuillError):
    status_code = 400
    default_message = "Invalid data"


class AuthenticationError(QuillError):
    status_code = 401
    default_message = "Not authorized"


class AuthorizationError(QuillError):
    status_code = 401
    default_message = "User not authorized"


class NotFoundError(QuillError):
    status_code = 404
    default_message = "Not found"


class ConflictError(QuillError):
    status_code = 400
    default_message = "Already exists"


class UploadError(QuillError):
    status_code = 400
    default_message = "Image upload failed"
