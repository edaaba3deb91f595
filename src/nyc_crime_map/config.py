"""Dashboard configuration read from the environment (and a local .env)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from dotenv import load_dotenv

from .color_scale import HIGH_COLOR, LOW_COLOR, hex_to_rgb
from .filter_engine import DEFAULT_STATS_SCOPE, STATS_SCOPES
from .time_window import TimeWindow
from .utils.exceptions import ConfigError, InvalidRangeError

logger = logging.getLogger(__name__)

NYC_CENTER = {"lat": 40.7128, "lon": -74.0060}
DEFAULT_ZOOM = 11.0


@dataclass(frozen=True)
class DashboardConfig:
    """
    Settings for one dashboard session

    Attributes:
    bounds (TimeWindow): Full date range behind the slider, and the initial time window
    stats_scope (str): 'full' counts every incident for the chart, 'filtered' only the visible ones
    low_color (str): Colour of the lowest severity
    high_color (str): Colour of the highest severity
    map_center (dict): {'lat', 'lon'} the map opens on
    map_zoom (float): Initial map zoom
    log_dir (str): Folder for log files
    """

    bounds: TimeWindow = TimeWindow(date(2023, 1, 1), date(2023, 12, 31))
    stats_scope: str = DEFAULT_STATS_SCOPE
    low_color: str = LOW_COLOR
    high_color: str = HIGH_COLOR
    map_center: Optional[Mapping[str, float]] = None
    map_zoom: float = DEFAULT_ZOOM
    log_dir: str = 'logs'

    def __post_init__(self) -> None:
        if self.map_center is None:
            object.__setattr__(self, 'map_center', dict(NYC_CENTER))


def _get(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None or not str(value).strip():
        return None
    return str(value).strip()


def _parse_date(env: Mapping[str, str], key: str, default: date) -> date:
    raw = _get(env, key)
    if raw is None:
        return default
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ConfigError(f'{key} must be an ISO date (YYYY-MM-DD), got {raw!r}')


def _parse_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = _get(env, key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f'{key} must be a number, got {raw!r}')


def _parse_color(env: Mapping[str, str], key: str, default: str) -> str:
    raw = _get(env, key)
    if raw is None:
        return default
    try:
        hex_to_rgb(raw)
    except ValueError:
        raise ConfigError(f'{key} must be a hex colour such as #f03b20, got {raw!r}')
    return raw if raw.startswith('#') else f'#{raw}'


def load_config(env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> DashboardConfig:
    """
    Build a DashboardConfig from environment variables

    Args:
    env (Mapping): Variables to read. Defaults to os.environ
    dotenv (bool): Load a local .env into os.environ first. Only used when env is None

    Returns:
    DashboardConfig: Parsed settings, defaults for anything unset

    Raises:
    ConfigError: A variable is set but malformed
    """
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    start = _parse_date(env, 'CRIME_MAP_START_DATE', date(2023, 1, 1))
    end = _parse_date(env, 'CRIME_MAP_END_DATE', date(2023, 12, 31))
    try:
        bounds = TimeWindow(start, end)
    except InvalidRangeError as e:
        raise ConfigError(f'CRIME_MAP_START_DATE must not be after CRIME_MAP_END_DATE : {str(e)}')

    stats_scope = (_get(env, 'CRIME_MAP_STATS_SCOPE') or DEFAULT_STATS_SCOPE).lower()
    if stats_scope not in STATS_SCOPES:
        raise ConfigError(f'CRIME_MAP_STATS_SCOPE must be one of {STATS_SCOPES}, got {stats_scope!r}')

    lat = _parse_float(env, 'CRIME_MAP_CENTER_LAT', NYC_CENTER['lat'])
    lon = _parse_float(env, 'CRIME_MAP_CENTER_LON', NYC_CENTER['lon'])
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        raise ConfigError(f'Map centre ({lat}, {lon}) is not a valid latitude/longitude')

    config = DashboardConfig(
        bounds=bounds,
        stats_scope=stats_scope,
        low_color=_parse_color(env, 'CRIME_MAP_LOW_COLOR', LOW_COLOR),
        high_color=_parse_color(env, 'CRIME_MAP_HIGH_COLOR', HIGH_COLOR),
        map_center={'lat': lat, 'lon': lon},
        map_zoom=_parse_float(env, 'CRIME_MAP_ZOOM', DEFAULT_ZOOM),
        log_dir=_get(env, 'CRIME_MAP_LOG_DIR') or 'logs',
    )
    logger.info(f'Loaded dashboard config: {config.bounds.start:%Y-%m-%d} to {config.bounds.end:%Y-%m-%d}, stats scope {config.stats_scope}')
    return config


__all__ = ['DashboardConfig', 'load_config', 'NYC_CENTER', 'DEFAULT_ZOOM']
