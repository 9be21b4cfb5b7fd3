from __future__ import annotations

import asyncio
import json
import logging
import time

import httpx
from jose import jwt

from push_broadcast.application.errors import ConfigurationError, ProviderError
from push_broadcast.domain.models.messaging import BatchResponse, MulticastMessage, SendResponse
from push_broadcast.domain.ports.messaging_provider import MessagingProvider

logger = logging.getLogger(__name__)

FCM_ERROR_TYPE = "type.googleapis.com/google.firebase.fcm.v1.FcmError"


class FCMv1Provider(MessagingProvider):
    """Firebase Cloud Messaging HTTP v1 sender using a Service Account JSON.

    It generates a short-lived OAuth2 access token via JWT assertion and sends one
    request per token to the v1 endpoint. The v1 API has no batch endpoint, so a
    multicast is a bounded fan-out whose results keep the input token order.
    """

    OAUTH_TOKEN_URL = "https://oauth2.googleapis.com/token"
    SCOPE = "https://www.googleapis.com/auth/firebase.messaging"

    def __init__(
        self,
        *,
        project_id: str,
        service_account_json: str,
        timeout: float = 10.0,
        max_concurrency: int = 20,
        dry_run: bool = False,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        try:
            self.sa = json.loads(service_account_json)
        except json.JSONDecodeError as exc:
            raise ConfigurationError("FCM service account is not valid JSON") from exc
        self.project_id = project_id
        self.dry_run = dry_run
        self.max_concurrency = max_concurrency
        self.endpoint = f"https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._cached_token: str | None = None
        self._token_exp: int = 0
        self._token_lock = asyncio.Lock()

    async def send_multicast(self, message: MulticastMessage) -> BatchResponse:
        access_token = await self._get_access_token()
        headers = {"Authorization": f"Bearer {access_token}", "Content-Type": "application/json"}
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def send_one(token: str) -> SendResponse:
            async with semaphore:
                return await self._send_to_token(token, message, headers)

        # A transport failure aborts the batch and cancels the sends still in flight
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(send_one(token)) for token in message.tokens]
        except ExceptionGroup as errors:
            raise errors.exceptions[0]
        batch = BatchResponse(responses=[task.result() for task in tasks])
        logger.info(
            "FCM v1 multicast: tokens=%d success=%d failure=%d",
            len(message.tokens),
            batch.success_count,
            batch.failure_count,
        )
        return batch

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send_to_token(
        self, token: str, message: MulticastMessage, headers: dict[str, str]
    ) -> SendResponse:
        payload = {
            "validate_only": self.dry_run,
            "message": {
                "token": token,
                "notification": {
                    "title": message.notification.title,
                    "body": message.notification.body,
                },
                "data": message.data,
            },
        }
        try:
            resp = await self._client.post(self.endpoint, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error("FCM v1 transport error: %s", exc)
            raise ProviderError(f"FCM request failed: {exc}") from exc
        if resp.status_code >= 400:
            error_message, error_code = _parse_error(resp)
            logger.warning("FCM v1 error %s: %s", resp.status_code, error_message)
            return SendResponse.failed(error_message, code=error_code)
        logger.debug("FCM v1 sent: %s", resp.text)
        return SendResponse.delivered(_parse_message_id(resp))

    async def _get_access_token(self) -> str:
        async with self._token_lock:
            now = int(time.time())
            # Reuse cached token if valid for > 60s
            if self._cached_token and now < (self._token_exp - 60):
                return self._cached_token

            exp = now + 3600
            try:
                assertion = jwt.encode(
                    {
                        "iss": self.sa["client_email"],
                        "scope": self.SCOPE,
                        "aud": self.OAUTH_TOKEN_URL,
                        "iat": now,
                        "exp": exp,
                    },
                    self.sa["private_key"],
                    algorithm="RS256",
                )
            except KeyError as exc:
                raise ConfigurationError(f"FCM service account is missing {exc}") from exc

            data = {
                "grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer",
                "assertion": assertion,
            }
            try:
                resp = await self._client.post(self.OAUTH_TOKEN_URL, data=data)
                resp.raise_for_status()
                token = resp.json()["access_token"]
            except (httpx.HTTPError, ValueError, KeyError) as exc:
                logger.error("FCM v1 access token exchange failed: %s", exc)
                raise ProviderError(f"Unable to obtain FCM access token: {exc}") from exc
            self._cached_token = token
            self._token_exp = exp
            return token


def _json_object(resp: httpx.Response) -> dict | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _parse_message_id(resp: httpx.Response) -> str | None:
    body = _json_object(resp) or {}
    return body.get("name")


def _parse_error(resp: httpx.Response) -> tuple[str, str | None]:
    body = _json_object(resp)
    if body is None:
        return resp.text or f"HTTP {resp.status_code}", None
    error = body.get("error") or {}
    code = error.get("status")
    for detail in error.get("details") or []:
        if detail.get("@type") == FCM_ERROR_TYPE and detail.get("errorCode"):
            code = detail["errorCode"]
            break
    return error.get("message") or f"HTTP {resp.status_code}", code
