from pathlib import Path

# Repo-root conventional directories/files (overrideable on the command line)
CONFIG_DIR = Path("configs")
SERVICE_CONFIG_FILE = CONFIG_DIR / "taxonomy_service.yaml"

DEFAULT_BASE_URL = "https://api.aviationreporting.eu/taxonomy-service"

# Environment variable overrides
ENV_BASE_URL = "ECCAIRS_TAXONOMY_URL"
ENV_TIMEOUT_S = "ECCAIRS_TIMEOUT_S"
ENV_MAX_RETRIES = "ECCAIRS_MAX_RETRIES"
ENV_RETRY_DELAY_S = "ECCAIRS_RETRY_DELAY_S"
