"""
Entry point for the Webflow to Sanity migration tool.
"""

import sys

from sanity_migration_tool.migration_tool import SanityMigrationTool
from sanity_migration_tool.utils.pre_flight_checks import PreFlightCheckError, run_pre_flight_checks

CONFIG_FILE = "config/migration_config.json"


def main() -> int:
    """
    Main function to run the Webflow to Sanity migration tool.
    """
    tool = SanityMigrationTool(config_file=CONFIG_FILE)
    tool.log_message("Starting Webflow to Sanity migration.")

    try:
        run_pre_flight_checks(tool.config)
    except PreFlightCheckError as e:
        tool.log_message(str(e), level="ERROR")
        return 1

    try:
        tool.run()
    except KeyboardInterrupt:
        tool.log_message("Migration interrupted by the operator.", level="WARNING")
        return 1

    tool.log_message("Migration process finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
