import pytest

from tripwise.core.geo import centroid, distance_km, path_length_km
from tripwise.domain.errors import InvalidInputError
from tripwise.domain.models import Coordinate

LISBON = Coordinate(latitude=38.7223, longitude=-9.1393)
PORTO = Coordinate(latitude=41.1579, longitude=-8.6291)
SYDNEY = Coordinate(latitude=-33.8688, longitude=151.2093)


def test_distance_is_symmetric():
    for a, b in [(LISBON, PORTO), (PORTO, SYDNEY), (SYDNEY, LISBON)]:
        assert distance_km(a, b) == distance_km(b, a)


def test_distance_to_self_is_zero():
    assert distance_km(LISBON, LISBON) == pytest.approx(0.0, abs=1e-9)
    assert distance_km(SYDNEY, SYDNEY.model_copy()) == pytest.approx(0.0, abs=1e-9)


def test_one_degree_of_latitude_is_about_111_km():
    a = Coordinate(latitude=0.0, longitude=0.0)
    b = Coordinate(latitude=1.0, longitude=0.0)
    assert distance_km(a, b) == pytest.approx(111.195, abs=0.01)


def test_lisbon_to_porto_is_roughly_274_km():
    assert distance_km(LISBON, PORTO) == pytest.approx(274, abs=3)


def test_antipodal_points_do_not_blow_up():
    a = Coordinate(latitude=0.0, longitude=0.0)
    b = Coordinate(latitude=0.0, longitude=180.0)
    assert distance_km(a, b) == pytest.approx(20015.1, abs=1)


def test_centroid_is_arithmetic_mean():
    c = centroid([Coordinate(latitude=10, longitude=20), Coordinate(latitude=20, longitude=40)])
    assert c.latitude == pytest.approx(15)
    assert c.longitude == pytest.approx(30)


def test_centroid_of_single_point_is_that_point():
    assert centroid([LISBON]) == LISBON


def test_centroid_rejects_empty_sequence():
    with pytest.raises(InvalidInputError) as excinfo:
        centroid([])
    assert excinfo.value.field == "points"


def test_path_length_sums_consecutive_legs():
    assert path_length_km([]) == 0
    assert path_length_km([LISBON]) == 0
    expected = distance_km(LISBON, PORTO) + distance_km(PORTO, LISBON)
    assert path_length_km([LISBON, PORTO, LISBON]) == pytest.approx(expected)
