"""장비 유형 기준정보 / 장비 설정 모델 테스트."""

from datetime import datetime

import pytest

from analytics.models import DeviceConfig
from master_data.device_type import DEVICE_TYPES, get_device_type, get_temperature_limits


class TestDeviceType:
    def test_types(self):
        assert set(DEVICE_TYPES) == {"FRIDGE", "FREEZER"}

    def test_fridge_limits(self):
        assert get_temperature_limits("FRIDGE") == (2.0, 8.0)

    def test_freezer_limits(self):
        assert get_temperature_limits("FREEZER") == (-25.0, -18.0)

    def test_humidity_defaults(self):
        for device_type in DEVICE_TYPES:
            spec = get_device_type(device_type)
            assert spec["humidity_min"] == 30.0
            assert spec["humidity_max"] == 70.0

    def test_unknown_type(self):
        with pytest.raises(KeyError):
            get_device_type("WALK_IN")


class TestDeviceConfig:
    def test_explicit_limits_win(self):
        device = DeviceConfig(device_type="FRIDGE", temp_min=1.0, temp_max=6.0)
        assert device.temperature_limits() == (1.0, 6.0)

    def test_partial_limits(self):
        device = DeviceConfig(device_type="FRIDGE", temp_max=6.0, humidity_max=60.0)
        assert device.temperature_limits() == (2.0, 6.0)
        assert device.humidity_limits() == (30.0, 60.0)

    def test_age_days(self):
        device = DeviceConfig(device_type="FRIDGE", install_date=datetime(2021, 1, 1))
        assert device.age_days(datetime(2021, 1, 31, 12)) == 30

    def test_unknown_install_date(self):
        assert DeviceConfig(device_type="FRIDGE").age_days(datetime(2026, 1, 1)) == 0
