"""CLI adapter to rebuild property statistics from the ledger.

Set ``STATS_RECALCULATE_PROPERTY_ID`` to rebuild one property or
``STATS_RECALCULATE_PROPERTY_IDS`` (comma separated) to rebuild a list;
with neither set every property is rebuilt. An invalid value aborts the
run instead of rebuilding everything.
"""

from property_stats.adapters._env import is_set, read_int, read_int_list
from property_stats.domain.exceptions import StatisticsStoreError
from property_stats.infrastructure.container import (
    build_recalculate_statistics_use_case,
)
from property_stats.infrastructure.logging.logger import get_app_logger

PROPERTY_ID_VAR = "STATS_RECALCULATE_PROPERTY_ID"
PROPERTY_IDS_VAR = "STATS_RECALCULATE_PROPERTY_IDS"


def main() -> None:
    """Run the recalculation use case and print the per-key summary."""
    logger = get_app_logger()
    property_id = read_int(PROPERTY_ID_VAR, logger)
    property_ids = read_int_list(PROPERTY_IDS_VAR, logger)
    for name, value in (
        (PROPERTY_ID_VAR, property_id),
        (PROPERTY_IDS_VAR, property_ids),
    ):
        if value is None and is_set(name):
            logger.error(f"Recalculation aborted: {name} is not valid.")
            return

    use_case = build_recalculate_statistics_use_case()
    try:
        if property_ids is not None:
            summary = use_case.execute_for_properties(property_ids)
            scope = f"properties {', '.join(map(str, property_ids)) or '-'}"
        else:
            summary = use_case.execute(property_id)
            scope = (
                f"property {property_id}"
                if property_id is not None
                else "all properties"
            )
    except StatisticsStoreError as exc:
        logger.error(f"Recalculation failed: {exc}")
        return

    print(f"Recalculated statistics for {scope}")
    for key, values in summary.as_dict().items():
        print(f"{key}: count={values['count']}, total={values['total']}")


if __name__ == "__main__":  # pragma: no cover
    main()
