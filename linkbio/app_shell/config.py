import logging
import os
import sys
from pathlib import Path

from linkbio.rules.models import Rules

logger = logging.getLogger(__name__)


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Exits the process when a required environment variable is missing.
    """
    ops = rules.ops

    # 1. Data dir must exist and be writable (the SQLite file lives there)
    if ops.data_dir_required:
        data_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(data_dir, os.W_OK):
            logger.critical("Data directory %s is not writable", data_dir)
            sys.exit(1)

    # 2. Required env
    missing = [env_var for env_var in ops.required_env if env_var not in os.environ]
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    logger.info("Configuration validated (rules %s).", rules.project.rules_version)
