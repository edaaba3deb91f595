import logging
from datetime import datetime

import pytest

from nyc_crime_map.config import DEFAULT_ZOOM, NYC_CENTER, load_config
from nyc_crime_map.utils.exceptions import ConfigError
from nyc_crime_map.utils.logger_config import setup_logger


class TestLoadConfig:
    def test_defaults(self):
        config = load_config(env={})
        assert config.bounds.as_tuple() == (datetime(2023, 1, 1), datetime(2023, 12, 31))
        assert config.stats_scope == 'full'
        assert config.low_color == '#ffeda0'
        assert config.high_color == '#f03b20'
        assert config.map_center == NYC_CENTER
        assert config.map_zoom == DEFAULT_ZOOM
        assert config.log_dir == 'logs'

    def test_overrides(self):
        config = load_config(env={
            'CRIME_MAP_START_DATE': '2024-01-01',
            'CRIME_MAP_END_DATE': '2024-06-30',
            'CRIME_MAP_STATS_SCOPE': 'Filtered',
            'CRIME_MAP_LOW_COLOR': 'ffffff',
            'CRIME_MAP_CENTER_LAT': '41.88',
            'CRIME_MAP_CENTER_LON': '-87.62',
            'CRIME_MAP_ZOOM': '12.5',
            'CRIME_MAP_LOG_DIR': '/tmp/crime-map-logs',
        })
        assert config.bounds.as_tuple() == (datetime(2024, 1, 1), datetime(2024, 6, 30))
        assert config.stats_scope == 'filtered'
        assert config.low_color == '#ffffff'
        assert config.map_center == {'lat': 41.88, 'lon': -87.62}
        assert config.map_zoom == 12.5
        assert config.log_dir == '/tmp/crime-map-logs'

    def test_blank_values_fall_back_to_defaults(self):
        config = load_config(env={'CRIME_MAP_STATS_SCOPE': '  ', 'CRIME_MAP_ZOOM': ''})
        assert config.stats_scope == 'full'
        assert config.map_zoom == DEFAULT_ZOOM

    @pytest.mark.parametrize('env', [
        {'CRIME_MAP_START_DATE': '01/01/2023'},
        {'CRIME_MAP_START_DATE': '2023-06-01', 'CRIME_MAP_END_DATE': '2023-01-01'},
        {'CRIME_MAP_STATS_SCOPE': 'weekly'},
        {'CRIME_MAP_HIGH_COLOR': 'red'},
        {'CRIME_MAP_LOW_COLOR': '#fff'},
        {'CRIME_MAP_ZOOM': 'close'},
        {'CRIME_MAP_CENTER_LAT': '123'},
    ])
    def test_malformed_values(self, env):
        with pytest.raises(ConfigError):
            load_config(env=env)


class TestLogger:
    def test_writes_daily_file(self, tmp_path):
        logger = setup_logger('nyc_crime_map.test_writes_daily_file', log_dir=str(tmp_path))
        logger.info('hello')
        files = list(tmp_path.glob('crime_map_*'))
        assert len(files) == 1
        assert 'hello' in files[0].read_text()

    def test_idempotent(self, tmp_path):
        first = setup_logger('nyc_crime_map.test_idempotent', log_dir=str(tmp_path))
        second = setup_logger('nyc_crime_map.test_idempotent', log_dir=str(tmp_path))
        assert first is second
        assert len(second.handlers) == 2
        assert second.level == logging.DEBUG
