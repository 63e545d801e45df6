"""CLI to compute the dashboard views from the exported assets and write them as JSON.

Example:

    python src/energy_dashboard/cli/build_dashboard_views.py \
      --data-dir data --entity 11 --year 2023 --variable temperature \
      --sort-column rmse --output out/views_11_2023.json
"""
from __future__ import annotations

from pathlib import Path
import argparse
import json
import logging

from energy_dashboard.data_models.aggregates import ALL, DashboardFilter
from energy_dashboard.errors import DashboardLoadError
from energy_dashboard.services.choropleth_service import ChoroplethVariable
from energy_dashboard.services.dashboard_view_service import build_dataset_views
from energy_dashboard.services.dataset_stats_service import summarize_dataset
from energy_dashboard.services.ingestion_service import load_dashboard_data
from energy_dashboard.services.metrics_table_service import (
    MetricsColumn,
    filter_metrics,
    sort_metrics,
    summarize_metrics,
)
from energy_dashboard.services.prediction_results_service import (
    entity_prediction_series,
    train_test_scatter,
)
from energy_dashboard.settings import get_settings

logger = logging.getLogger(__name__)


def _filter_value(raw: str):
    return ALL if raw == ALL else int(raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute dashboard views and write them as JSON.")
    parser.add_argument("--data-dir", dest="data_dir", type=str, default=None,
                        help="Directory holding the exported assets (defaults to the configured data_dir).")
    parser.add_argument("--entity", dest="entity", type=_filter_value, default=ALL,
                        help="Entity id to filter on, or 'all'.")
    parser.add_argument("--year", dest="year", type=_filter_value, default=ALL,
                        help="Year to filter on, or 'all'.")
    parser.add_argument("--variable", dest="variable", choices=[v.value for v in ChoroplethVariable],
                        default=ChoroplethVariable.CONSUMPTION.value,
                        help="Variable the map is coloured by.")
    parser.add_argument("--sort-column", dest="sort_column", choices=[c.value for c in MetricsColumn],
                        default=MetricsColumn.R2.value,
                        help="Column to sort the metrics table on.")
    parser.add_argument("--ascending", dest="ascending", action="store_true",
                        help="Sort the metrics table ascending (default descending).")
    parser.add_argument("--output", dest="output", type=str, default=None,
                        help="Write the JSON here instead of stdout.")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.data_dir:
        settings = settings.model_copy(update={"data_dir": Path(args.data_dir)})
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        data = load_dashboard_data(settings)
    except DashboardLoadError as exc:
        logger.error("%s", exc)
        return 1

    dashboard_filter = DashboardFilter(entity=args.entity, year=args.year)
    views = build_dataset_views(
        data.dataset,
        data.features,
        dashboard_filter,
        variable=args.variable,
        top_n=settings.top_n_entities,
    )

    table = filter_metrics(data.entity_metrics, dashboard_filter.entity)
    summary = summarize_dataset(data.dataset)
    metrics_summary = summarize_metrics(table)

    output = {
        "dataset_summary": summary.model_dump() if summary else None,
        "dataset_views": views.model_dump(mode="json"),
        "model_metrics": data.model_metrics.model_dump(),
        "metrics_summary": metrics_summary.model_dump() if metrics_summary else None,
        "metrics_table": [m.model_dump() for m in sort_metrics(table, MetricsColumn(args.sort_column), args.ascending)],
        "prediction_series": entity_prediction_series(data.prediction_results, dashboard_filter.entity).model_dump(mode="json"),
        "train_test_scatter": {k: v.model_dump() for k, v in train_test_scatter(data.train_test).items()},
    }

    text = json.dumps(output, indent=2, default=str, ensure_ascii=False)
    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(text, encoding="utf-8")
        logger.info("Wrote dashboard views to %s", args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
