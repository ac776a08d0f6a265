"""Cross-checks of the solar and lunar elevations against astropy.

These use astropy's bundled Earth orientation tables, so dates stay within
the range they cover and nothing is downloaded.
"""

import math

import pytest
from astropy import units as u
from astropy.coordinates import AltAz, EarthLocation, get_body, get_sun
from astropy.time import Time
from astropy.utils import iers

from daylength.astronomy.julian import julian_day
from daylength.astronomy.lunar import lunar_samples
from daylength.astronomy.solar import solar_elevations

SITES = [
    ("london", 51.5, 0.0),
    ("sydney", -33.87, 151.21),
    ("quito", -0.18, -78.47),
]
MINUTES = [0, 360, 600, 720, 900, 1080]


@pytest.fixture(autouse=True)
def offline_iers():
    previous = iers.conf.auto_download
    iers.conf.auto_download = False
    yield
    iers.conf.auto_download = previous


def _altitudes(body: str, latitude: float, longitude: float, day: str) -> list[float]:
    location = EarthLocation(lat=latitude * u.deg, lon=longitude * u.deg, height=0 * u.m)
    times = Time(day) + [m / 1440.0 for m in MINUTES] * u.day
    frame = AltAz(obstime=times, location=location)
    if body == "sun":
        coords = get_sun(times)
    else:
        coords = get_body("moon", times, location=location)
    return list(coords.transform_to(frame).alt.deg)


@pytest.mark.parametrize("name,latitude,longitude", SITES)
@pytest.mark.parametrize("day", ["2020-03-20", "2020-06-21", "2020-11-05"])
def test_solar_elevation_matches(name, latitude, longitude, day):
    year, month, dom = (int(part) for part in day.split("-"))
    series = solar_elevations(math.radians(latitude), longitude, 0.0, julian_day(year, month, dom))
    expected = _altitudes("sun", latitude, longitude, day)
    for minute, reference in zip(MINUTES, expected):
        assert series[minute] == pytest.approx(reference, abs=0.1), f"{name} {day} {minute}"


@pytest.mark.parametrize("name,latitude,longitude", SITES)
@pytest.mark.parametrize("day", ["2020-01-10", "2020-04-07", "2020-08-25"])
def test_lunar_elevation_matches(name, latitude, longitude, day):
    year, month, dom = (int(part) for part in day.split("-"))
    series = lunar_samples(math.radians(latitude), longitude, 0.0, julian_day(year, month, dom))
    expected = _altitudes("moon", latitude, longitude, day)
    for minute, reference in zip(MINUTES, expected):
        assert series[minute].elevation_deg == pytest.approx(reference, abs=1.0), (
            f"{name} {day} {minute}"
        )
