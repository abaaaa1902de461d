"""Authenticating gcloud and setting its default project.

``authenticate`` and ``set_project`` raise ``RuntimeError`` on failure. The
status check never raises: a failed check is reported as its own state so
callers decide how to treat it.
"""

import enum
import json
from dataclasses import dataclass
from typing import Optional

from absl import logging

from setup_gcloud.gcloud import run_gcloud


class AuthState(enum.Enum):
  AUTHENTICATED = "authenticated"
  UNAUTHENTICATED = "unauthenticated"
  CHECK_FAILED = "check_failed"


@dataclass(frozen=True)
class AuthStatus:
  state: AuthState
  reason: Optional[str] = None

  @property
  def authenticated(self) -> bool:
    # A check that could not run counts as not authenticated.
    return self.state is AuthState.AUTHENTICATED


def authenticate(credentials_file: str) -> None:
  """Log gcloud in with a credentials file (service account key or WIF)."""
  run_gcloud(["--quiet", "auth", "login", "--cred-file", credentials_file])
  logging.info("Authenticated gcloud with %s", credentials_file)


def check_authentication() -> AuthStatus:
  """Report whether gcloud has an active account."""
  try:
    result = run_gcloud(
      ["auth", "list", "--filter=status:ACTIVE", "--format=json"]
    )
    accounts = json.loads(result.stdout or "[]")
  except (RuntimeError, OSError, json.JSONDecodeError) as e:
    logging.info("gcloud authentication check failed: %s", e)
    return AuthStatus(AuthState.CHECK_FAILED, reason=str(e))

  if accounts:
    return AuthStatus(AuthState.AUTHENTICATED)
  return AuthStatus(AuthState.UNAUTHENTICATED)


def is_authenticated() -> bool:
  return check_authentication().authenticated


def set_project(project_id: str) -> None:
  """Set the default project for later gcloud invocations."""
  run_gcloud(["--quiet", "config", "set", "project", project_id])
  logging.info("Set default gcloud project to %s", project_id)
