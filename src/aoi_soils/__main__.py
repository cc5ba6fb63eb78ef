import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .arcgis import build_geometry_query_url
from .config import Settings
from .geometry import to_query_geometry
from .paging import SoilsQueryClient
from .service import OUT_FIELDS, lookup_soils


def _load_geometry(path):
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    # Accept the HTTP request body shape as well as a bare geometry/feature.
    if isinstance(data, dict) and "geometry" in data and "type" not in data:
        return data["geometry"]
    return data


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Soil map units and risk flags for an area of interest",
    )
    parser.add_argument(
        "--geometry",
        required=True,
        help="GeoJSON file with a Polygon, MultiPolygon or Feature",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Soils FeatureServer query URL (overrides SOILS_QUERY_URL)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-page request timeout in seconds",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, etc.)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit one JSON log line per page fetched",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the response payload to a file (path)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the first page query URL without contacting the service",
    )
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(
            level=args.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    settings = Settings.from_env()
    if args.url and args.url.strip():
        settings = replace(settings, query_url=args.url.strip())
    if args.timeout:
        settings = replace(settings, timeout_s=args.timeout)

    geometry = _load_geometry(args.geometry)

    if args.dry_run:
        query_geometry = to_query_geometry(geometry)
        print(
            build_geometry_query_url(
                settings.query_url,
                query_geometry,
                OUT_FIELDS,
                offset=0,
                page_size=settings.page_size,
            )
        )
        return

    client = SoilsQueryClient.from_settings(settings)
    try:
        payload = lookup_soils(geometry, settings=settings, client=client)
    finally:
        client.close()
        if args.log_json:
            for entry in client.last_log_entries:
                print(json.dumps(entry))

    if args.output:
        Path(args.output).write_text(json.dumps(payload), encoding="utf-8")

    print(
        f"Found {payload['count']} soil polygons, "
        f"{payload['distinctMapUnits']} distinct map units:"
    )
    for i, unit in enumerate(payload["uniqueMapUnits"]):
        raised = [k for k, v in unit["flags"].items() if v]
        print(
            f"{i+1}. {unit.get('musym') or 'N/A'}: {unit.get('muname') or 'N/A'}"
            + (f" [{', '.join(raised)}]" if raised else "")
        )
    print(json.dumps(payload["aggregateFlagsByMapUnit"]))


def _safe_main():
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:
        print(json.dumps({"error": str(exc)}))
        raise SystemExit(1)


if __name__ == "__main__":
    _safe_main()
