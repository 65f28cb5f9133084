import sys
import os
import pytest
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from gapflight.geometry import Rect, clamp, distance, segment_intersection


def test_segment_intersection_crossing():
    """Dois segmentos em cruz se encontram no centro."""
    point = segment_intersection((0.0, 0.0), (10.0, 10.0), (0.0, 10.0), (10.0, 0.0))
    assert point == pytest.approx((5.0, 5.0))

def test_segment_intersection_parallel_returns_none():
    assert segment_intersection((0.0, 0.0), (10.0, 0.0), (0.0, 5.0), (10.0, 5.0)) is None

def test_segment_intersection_out_of_reach():
    """As retas se cruzam, mas fora da extensão do primeiro segmento."""
    assert segment_intersection((0.0, 0.0), (4.0, 0.0), (5.0, -1.0), (5.0, 1.0)) is None

def test_segment_intersection_touching_endpoint():
    point = segment_intersection((0.0, 0.0), (5.0, 0.0), (5.0, -1.0), (5.0, 1.0))
    assert point == pytest.approx((5.0, 0.0))

def test_rect_contains_is_half_open():
    r = Rect(10.0, 20.0, 5.0, 5.0)
    assert r.right == 15.0
    assert r.bottom == 25.0
    assert r.contains(10.0, 20.0)
    assert r.contains(14.9, 24.9)
    assert not r.contains(15.0, 22.0)
    assert not r.contains(12.0, 25.0)

def test_rect_edges_and_offset():
    r = Rect(0.0, 0.0, 2.0, 3.0)
    edges = list(r.edges())
    assert len(edges) == 4
    # aresta esquerda primeiro
    assert edges[0] == ((0.0, 0.0), (0.0, 3.0))
    moved = r.offset(1.0, -1.0)
    assert (moved.left, moved.top, moved.width, moved.height) == (1.0, -1.0, 2.0, 3.0)

def test_clamp_and_distance():
    assert clamp(5.0, 0.0, 3.0) == 3.0
    assert clamp(-1.0, 0.0, 3.0) == 0.0
    assert clamp(1.5, 0.0, 3.0) == 1.5
    assert distance((0.0, 0.0), (3.0, 4.0)) == 5.0
