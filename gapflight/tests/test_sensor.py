import numpy as np
import sys
import os
import pytest
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from gapflight.geometry import Rect
from gapflight.sensor import ProximitySensor


@pytest.fixture
def open_sky_sensor():
    """Sensor padrão com chão e teto bem longe do alcance."""
    return ProximitySensor(sample_count=7, ceiling_y=-1000.0, floor_y=1000.0)


def test_single_ray_hits_edge_at_half_depth():
    """Um raio reto para frente, aresta a 150 de 300 -> 1 - 150/300 = 0.5."""
    sensor = ProximitySensor(sample_count=1, depth=300.0)
    wall = Rect(150.0, 50.0, 40.0, 100.0)
    output = sensor.read([wall], (0.0, 100.0))
    assert output.shape == (1,)
    assert output[0] == 0.5
    assert sensor.last_hits[0][1] == pytest.approx((150.0, 100.0))

def test_no_obstacles_reads_zero(open_sky_sensor):
    output = open_sky_sensor.read([], (0.0, 100.0))
    assert np.array_equal(output, np.zeros(7))
    assert open_sky_sensor.last_hits == []
    assert len(open_sky_sensor.last_rays) == 7

def test_obstacle_beyond_depth_reads_zero():
    sensor = ProximitySensor(sample_count=1, depth=300.0)
    far = Rect(400.0, 0.0, 40.0, 200.0)
    assert sensor.read([far], (0.0, 100.0))[0] == 0.0

def test_floor_is_detected():
    """Raio apontando para baixo encontra o chão a 100 unidades."""
    sensor = ProximitySensor(sample_count=1, field_of_view=(90.0, 90.0), depth=300.0, floor_y=294.0)
    output = sensor.read([], (0.0, 194.0))
    assert output[0] == pytest.approx(1.0 - 100.0 / 300.0)

def test_ceiling_is_detected():
    sensor = ProximitySensor(sample_count=1, field_of_view=(-90.0, -90.0), depth=300.0, ceiling_y=0.0)
    output = sensor.read([], (0.0, 60.0))
    assert output[0] == pytest.approx(1.0 - 60.0 / 300.0)

def test_nearest_rectangle_wins_regardless_of_order():
    sensor = ProximitySensor(sample_count=1, depth=300.0)
    far = Rect(200.0, 0.0, 40.0, 200.0)
    near = Rect(60.0, 0.0, 40.0, 200.0)
    output = sensor.read([far, near], (0.0, 100.0))
    assert output[0] == pytest.approx(1.0 - 60.0 / 300.0)
    assert sensor.last_hits[0][1] == pytest.approx((60.0, 100.0))

def test_readings_stay_in_unit_interval():
    rng = np.random.default_rng(7)
    sensor = ProximitySensor(sample_count=9)
    for _ in range(20):
        rects = [Rect(float(x), float(y), 40.0, float(h))
                 for x, y, h in zip(rng.uniform(-100, 300, 4), rng.uniform(0, 250, 4), rng.uniform(5, 100, 4))]
        output = sensor.read(rects, (float(rng.uniform(0, 100)), float(rng.uniform(0, 294))))
        assert np.all(output >= 0.0)
        assert np.all(output <= 1.0)

def test_read_is_idempotent():
    sensor = ProximitySensor()
    rects = [Rect(120.0, 0.0, 40.0, 90.0), Rect(120.0, 170.0, 40.0, 123.0)]
    first = sensor.read(rects, (24.0, 130.0))
    second = sensor.read(rects, (24.0, 130.0))
    assert np.array_equal(first, second)

def test_angles_span_field_of_view():
    sensor = ProximitySensor(sample_count=5, field_of_view=(-120.0, 120.0))
    assert sensor.angles == pytest.approx([-120.0, -60.0, 0.0, 60.0, 120.0])

def test_invalid_sample_count():
    with pytest.raises(ValueError):
        ProximitySensor(sample_count=0)

def test_tie_keeps_first_intersection_found(mocker):
    """Duas interseções à mesma distância: fica a primeira encontrada."""
    sensor = ProximitySensor(sample_count=1, depth=300.0)
    first, second = (150.0, 100.0), (0.0, 250.0)
    mocker.patch("gapflight.sensor.segment_intersection", side_effect=[first, second])
    segments = [((150.0, 0.0), (150.0, 200.0)), ((-10.0, 250.0), (10.0, 250.0))]
    nearest, hit = sensor._nearest_hit((0.0, 100.0), (300.0, 100.0), segments)
    assert nearest == pytest.approx(0.5)
    assert hit == first

def test_tie_between_rectangles_keeps_first_rectangle():
    sensor = ProximitySensor(sample_count=1, depth=300.0, ceiling_y=-1000.0, floor_y=1000.0)
    upper = Rect(150.0, 20.0, 40.0, 80.0)
    lower = Rect(150.0, 100.0, 40.0, 80.0)
    # as duas arestas esquerdas encontram o raio no mesmo ponto (150, 100)
    output = sensor.read([upper, lower], (0.0, 100.0))
    assert output[0] == 0.5
    assert sensor.last_hits == [((0.0, 100.0), (150.0, 100.0))]
