"""Fixed parameters of the command generation pipeline."""

# OpenAI chat model used when the caller does not pick one
DEFAULT_MODEL = "gpt-4o-mini"
# Low temperature keeps the Command:/Explanation: layout stable
TEMPERATURE = 0.2

MAX_RETRIES = 3
REQUEST_TIMEOUT = 30.0  # seconds per attempt

RATE_LIMIT_BACKOFF = 1.0  # seconds, multiplied by attempt + 1
DEFAULT_BACKOFF = 0.3

API_KEY_ENV = "OPENAI_API_KEY"
FAKE_RESPONSE_ENV = "TASK_SH_FAKE_RESPONSE"
DISABLE_MACHINE_CONTEXT_ENV = "TASK_SH_DISABLE_MACHINE_CONTEXT"

GUIDANCE_COMMAND = "# Please provide more details."
