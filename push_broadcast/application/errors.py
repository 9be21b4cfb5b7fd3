from __future__ import annotations


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    # Reported as 500 to stay compatible with existing broadcast clients
    code = "validation_error"
    status_code = 500


class ProviderError(AppError):
    code = "provider_error"
    status_code = 500


class ConfigurationError(AppError):
    code = "configuration_error"
    status_code = 500
