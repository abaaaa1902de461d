"""Environment variable names and fixed values for setup-gcloud."""

ACTION_NAME = "google-github-actions/setup-gcloud"
LATEST_RELEASE_LINE = "v3"
TOOL_NAME = "gcloud"

# Version input sentinels.
LATEST = "latest"
ANY_VERSION = "> 0.0.0"

# Exported for every later step in the job.
METRICS_ENVIRONMENT = "github-actions-setup-gcloud"
METRICS_ENVIRONMENT_ENV_VAR = "CLOUDSDK_METRICS_ENVIRONMENT"
METRICS_ENVIRONMENT_VERSION_ENV_VAR = "CLOUDSDK_METRICS_ENVIRONMENT_VERSION"
DISABLE_PROMPTS_ENV_VAR = "CLOUDSDK_CORE_DISABLE_PROMPTS"

# Written by google-github-actions/auth.
CREDENTIALS_FILE_ENV_VAR = "GOOGLE_GHA_CREDS_PATH"

# Runner-provided locations.
TOOL_CACHE_ENV_VAR = "RUNNER_TOOL_CACHE"
RUNNER_TEMP_ENV_VAR = "RUNNER_TEMP"
REPOSITORY_ENV_VAR = "GITHUB_REPOSITORY"
ACTION_REF_ENV_VAR = "GITHUB_ACTION_REF"
ACTION_REPOSITORY_ENV_VAR = "GITHUB_ACTION_REPOSITORY"

RELEASE_BUCKET = "cloud-sdk-release"
RELEASE_PREFIX = "google-cloud-sdk-"

SUBSCRIPTION_URL = (
  "https://agent.api.stepsecurity.io/v1/github/{repository}"
  "/actions/subscription"
)
SUBSCRIPTION_TIMEOUT_SECONDS = 3.0

# Status used when the subscription check rejects the repository.
EXIT_SUBSCRIPTION_REJECTED = 1
