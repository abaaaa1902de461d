"""Subscription check for the invoking repository.

Runs before anything else. Only an explicit rejection stops the action; an
unreachable or slow endpoint must never block a build.
"""

import enum
import os
from typing import Optional

import urllib3

from setup_gcloud import actions
from setup_gcloud.constants import (
  REPOSITORY_ENV_VAR,
  SUBSCRIPTION_TIMEOUT_SECONDS,
  SUBSCRIPTION_URL,
)


class SubscriptionStatus(enum.Enum):
  VALID = "valid"
  REJECTED = "rejected"
  UNREACHABLE = "unreachable"


def subscription_url(repository: str) -> str:
  return SUBSCRIPTION_URL.format(repository=repository)


def validate_subscription(
  repository: Optional[str] = None,
  http: Optional[urllib3.PoolManager] = None,
) -> SubscriptionStatus:
  """Ask the subscription endpoint whether ``repository`` may run this action.

  Args:
      repository: ``owner/name``; defaults to ``GITHUB_REPOSITORY``.
      http: Pool manager to issue the request with.

  Returns:
      ``REJECTED`` on HTTP 403, ``VALID`` on success, ``UNREACHABLE``
      otherwise. The caller decides whether to halt.
  """
  if repository is None:
    repository = os.environ.get(REPOSITORY_ENV_VAR, "")
  http = http or urllib3.PoolManager()

  try:
    response = http.request(
      "GET",
      subscription_url(repository),
      timeout=urllib3.Timeout(total=SUBSCRIPTION_TIMEOUT_SECONDS),
      retries=False,
    )
  except urllib3.exceptions.HTTPError:
    actions.info("Timeout or API not reachable. Continuing to next step.")
    return SubscriptionStatus.UNREACHABLE

  if response.status == 403:
    actions.error(
      "Subscription is not valid. Reach out to support@stepsecurity.io"
    )
    return SubscriptionStatus.REJECTED
  if response.status >= 400:
    actions.info("Timeout or API not reachable. Continuing to next step.")
    return SubscriptionStatus.UNREACHABLE
  return SubscriptionStatus.VALID
