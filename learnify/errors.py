"""
Error types raised by routes and services

Every request-facing error is an HTTPException so it can be raised from
service code and rendered by the app as {"error": detail}.
"""

from fastapi import HTTPException


class ConfigError(RuntimeError):
    """Required configuration is missing or unusable"""


class ServiceError(HTTPException):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class ValidationError(ServiceError):
    status_code = 400


class AuthError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class UpstreamError(ServiceError):
    """AI provider failure, message is surfaced to the caller"""
    status_code = 500


class InternalError(ServiceError):
    """Store failure, message is always generic"""
    status_code = 500
