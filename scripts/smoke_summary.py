#!/usr/bin/env python3
"""Generate a smoke summary CSV of the derived view for every crime type selection.

Writes: reports/smoke_summary.csv
"""
from pathlib import Path
import pandas as pd
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT / 'src'
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from nyc_crime_map import (
    INCIDENT_CATEGORIES,
    default_filter_state,
    derive_view,
    load_config,
    seed_store,
    set_incident_category,
)
from nyc_crime_map.taxonomy import category_options
from nyc_crime_map.utils import setup_logger

OUT = ROOT / 'reports' / 'smoke_summary.csv'


def scan_selections(store, config):
    rows = []
    base = default_filter_state(config.bounds)
    for selection in category_options(INCIDENT_CATEGORIES):
        state = set_incident_category(base, selection)
        view = derive_view(store, state, stats_scope=config.stats_scope)
        rows.append({
            'selection': selection,
            'visible_incidents': len(view.visible_incidents),
            'visible_venues': len(view.visible_venues),
            'counted_incidents': view.counted_total,
            'stats_scope': config.stats_scope,
        })
    return rows


def main():
    config = load_config()
    logger = setup_logger('nyc_crime_map', log_dir=config.log_dir)
    store = seed_store()
    if not store.has_incidents:
        print('No incident records loaded; nothing to report.', file=sys.stderr)
        return 2
    df = pd.DataFrame(scan_selections(store, config))
    OUT.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(OUT, index=False)
    logger.info(f'Wrote {OUT} rows={len(df)}')
    return 0

if __name__ == '__main__':
    raise SystemExit(main())
