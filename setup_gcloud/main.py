"""setup-gcloud: install, authenticate and configure gcloud for a job.

The run is one pass in a fixed order:

1. Subscription check (a rejection halts before anything else).
2. Metrics and prompt-disabling variables are exported for the job.
3. Pinned-to-branch advisory.
4. Inside a single error boundary: read inputs, install or find gcloud,
   install extra components, authenticate, set the project, and report the
   ``version`` output.
"""

import enum
import os
from dataclasses import dataclass, field
from typing import Optional

from setup_gcloud import (
  __version__,
  actions,
  credentials,
  sdk,
  subscription,
  tool_cache,
  versions,
)
from setup_gcloud.constants import (
  ACTION_NAME,
  ANY_VERSION,
  CREDENTIALS_FILE_ENV_VAR,
  DISABLE_PROMPTS_ENV_VAR,
  EXIT_SUBSCRIPTION_REJECTED,
  LATEST_RELEASE_LINE,
  METRICS_ENVIRONMENT,
  METRICS_ENVIRONMENT_ENV_VAR,
  METRICS_ENVIRONMENT_VERSION_ENV_VAR,
  TOOL_NAME,
)


@dataclass(frozen=True)
class StepInputs:
  """Action inputs, read once at the start of the run."""

  skip_install: bool = False
  version: versions.VersionSpec = field(default_factory=versions.Unspecified)
  components: tuple[str, ...] = ()
  project_id: Optional[str] = None
  cache: bool = False

  @classmethod
  def from_action(cls) -> "StepInputs":
    return cls(
      skip_install=actions.parse_boolean(actions.get_input("skip_install")),
      version=versions.parse_version_spec(actions.get_input("version")),
      components=tuple(
        parse_components(actions.get_input("install_components"))
      ),
      project_id=actions.presence(actions.get_input("project_id")),
      cache=actions.parse_boolean(actions.get_input("cache")),
    )


class InstallationOutcome(enum.Enum):
  CACHED = "cached"
  INSTALLED = "installed"
  SKIPPED = "skipped"


@dataclass(frozen=True)
class InstallResult:
  outcome: InstallationOutcome
  version: Optional[str] = None  # None when installation was skipped.
  path: Optional[str] = None


class AuthenticationOutcome(enum.Enum):
  AUTHENTICATED_VIA_CREDENTIALS_FILE = "credentials_file"
  ALREADY_AUTHENTICATED = "already_authenticated"
  UNAUTHENTICATED_WARNED = "unauthenticated"


def parse_components(value: Optional[str]) -> list[str]:
  """Split a comma-separated component list, dropping blank entries."""
  if not value:
    return []
  return [comp.strip() for comp in value.split(",") if comp.strip()]


def export_metrics_environment() -> None:
  """Export the variables every later gcloud invocation in the job sees."""
  actions.export_variable(METRICS_ENVIRONMENT_ENV_VAR, METRICS_ENVIRONMENT)
  actions.export_variable(METRICS_ENVIRONMENT_VERSION_ENV_VAR, __version__)
  actions.export_variable(DISABLE_PROMPTS_ENV_VAR, "1")


def install_sdk(inputs: StepInputs) -> InstallResult:
  """Make the requested gcloud version available on ``PATH``.

  A version already in the tool cache is reused; otherwise it is downloaded.
  Nothing is resolved or installed when ``skip_install`` is set.
  """
  if inputs.skip_install:
    actions.info('Skipping installation ("skip_install" was true)')
    # "latest" without an install is a no-op, so only pinned values warn.
    if isinstance(inputs.version, (versions.Exact, versions.Range)):
      actions.warning('Ignoring "version" because "skip_install" was true!')
    if inputs.components:
      actions.warning(
        "Installing custom components with the system-provided gcloud may "
        'fail. Set "skip_install" to false to install a managed version.'
      )
    return InstallResult(InstallationOutcome.SKIPPED)

  spec = inputs.version
  if isinstance(spec, versions.Unspecified):
    actions.debug("version was unset, defaulting to any version")
    constraint = ANY_VERSION
  elif isinstance(spec, versions.Latest):
    actions.debug("resolving latest version")
    constraint = sdk.best_version(ANY_VERSION)
    actions.debug(f"resolved latest version to {constraint}")
  else:
    constraint = spec.value

  # The reported version is the constraint itself, never recomputed.
  cached = tool_cache.find(TOOL_NAME, constraint)
  if cached is not None:
    actions.debug(f'using cached gcloud {cached.version} for "{constraint}"')
    actions.add_path(os.path.join(cached.path, "bin"))
    return InstallResult(
      InstallationOutcome.CACHED, version=constraint, path=cached.path
    )

  actions.debug(f'no version of gcloud matching "{constraint}" is installed')
  installed = sdk.install_gcloud_sdk(constraint, inputs.cache)
  actions.debug(f"installed gcloud {installed}")
  return InstallResult(InstallationOutcome.INSTALLED, version=constraint)


def install_extra_components(inputs: StepInputs) -> None:
  if inputs.components:
    sdk.install_components(list(inputs.components))


def authenticate() -> AuthenticationOutcome:
  """Authenticate gcloud from the credentials file left by the auth action.

  Without a credentials file, an unauthenticated gcloud only warns.
  """
  cred_file = os.environ.get(CREDENTIALS_FILE_ENV_VAR)
  if cred_file:
    credentials.authenticate(cred_file)
    actions.info("Successfully authenticated")
    return AuthenticationOutcome.AUTHENTICATED_VIA_CREDENTIALS_FILE

  status = credentials.check_authentication()
  if status.authenticated:
    return AuthenticationOutcome.ALREADY_AUTHENTICATED

  actions.warning(
    "The gcloud CLI is not authenticated (or it is not installed). "
    'Authenticate by adding the "google-github-actions/auth" step '
    "prior this one."
  )
  return AuthenticationOutcome.UNAUTHENTICATED_WARNED


def configure_project(project_id: str) -> None:
  credentials.set_project(project_id)
  actions.info("Successfully set default project")


def run() -> int:
  """Run the action and return the process exit status."""
  status = subscription.validate_subscription()
  if status is subscription.SubscriptionStatus.REJECTED:
    return EXIT_SUBSCRIPTION_REJECTED

  export_metrics_environment()

  if actions.is_pinned_to_head():
    actions.warning(actions.pinned_to_head_warning(LATEST_RELEASE_LINE))

  try:
    inputs = StepInputs.from_action()
    result = install_sdk(inputs)
    install_extra_components(inputs)
    authenticate()
    if inputs.project_id:
      configure_project(inputs.project_id)
    if result.version is not None:
      actions.set_output("version", result.version)
  except Exception as e:
    actions.set_failed(f"{ACTION_NAME} failed with: {actions.error_message(e)}")
    return 1
  return 0
