from fastapi import HTTPException


class PostStoreError(HTTPException):
    """Base class for failures returned by the post store"""
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class PostNotFoundError(PostStoreError):
    status_code = 404


class UnauthorizedError(PostStoreError):
    status_code = 403


class ReactionConflictError(PostStoreError):
    status_code = 409


class NoResultsError(PostStoreError):
    status_code = 404
