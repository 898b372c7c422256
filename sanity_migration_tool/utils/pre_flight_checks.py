from typing import Any, Dict, List


class PreFlightCheckError(Exception):
    """Custom exception for pre-flight check failures."""
    pass


def run_pre_flight_checks(config: Dict[str, Any]) -> None:
    """
    Verifies that the credentials needed for the migration are configured.

    The Webflow API key is always required. The Sanity project id, dataset
    and write token are required unless the run is a dry run.

    Args:
        config: The application configuration dictionary.

    Raises:
        PreFlightCheckError: naming every missing setting.
    """
    print("[INFO] Running pre-flight checks...")

    missing: List[str] = []
    if not config.get("webflow", {}).get("api_key"):
        missing.append("WEBFLOW_API_KEY")

    if not config.get("migration", {}).get("dry_run", False):
        sanity = config.get("sanity", {})
        if not sanity.get("project_id"):
            missing.append("SANITY_PROJECT_ID")
        if not sanity.get("dataset"):
            missing.append("SANITY_DATASET")
        if not sanity.get("token"):
            missing.append("SANITY_TOKEN")

    if missing:
        raise PreFlightCheckError(f"Missing configuration: {', '.join(missing)}")

    print("[INFO] Pre-flight checks passed successfully.")
