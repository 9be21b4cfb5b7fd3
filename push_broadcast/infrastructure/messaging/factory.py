from __future__ import annotations

from push_broadcast.application.errors import ConfigurationError
from push_broadcast.config.settings import Settings
from push_broadcast.domain.ports.messaging_provider import MessagingProvider
from push_broadcast.infrastructure.messaging.logging_provider import LoggingMessagingProvider


def build_messaging_provider(settings: Settings) -> MessagingProvider:
    if settings.messaging_provider == "logging":
        return LoggingMessagingProvider()

    sa_json = settings.get_fcm_service_account_json()
    if not sa_json:
        raise ConfigurationError(
            "FCM service account not configured. Set FCM_SERVICE_ACCOUNT_JSON or "
            "FCM_SERVICE_ACCOUNT_FILE."
        )

    if settings.messaging_provider == "firebase_admin":
        from push_broadcast.infrastructure.messaging.firebase_admin_provider import (
            FirebaseAdminProvider,
        )

        return FirebaseAdminProvider(
            service_account_json=sa_json,
            project_id=settings.fcm_project_id,
            dry_run=settings.fcm_dry_run,
        )

    if not settings.fcm_project_id:
        raise ConfigurationError("FCM_PROJECT_ID is required for the fcm_v1 provider")
    from push_broadcast.infrastructure.messaging.fcm_v1 import FCMv1Provider

    return FCMv1Provider(
        project_id=settings.fcm_project_id,
        service_account_json=sa_json,
        timeout=settings.fcm_timeout_seconds,
        max_concurrency=settings.fcm_max_concurrency,
        dry_run=settings.fcm_dry_run,
    )
