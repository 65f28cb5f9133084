import numpy as np
import sys
import os
import pytest
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from gapflight.config import CourseConfig
from gapflight.course import HIT_POINTS, ObstacleField
from gapflight.geometry import Rect


@pytest.fixture
def field():
    """Percurso aleatório com seed fixa."""
    return ObstacleField(CourseConfig(), rng=np.random.default_rng(42))


@pytest.fixture
def fixed_field():
    """Quatro vãos fixos, centro em y=150."""
    return ObstacleField(CourseConfig(course_length=1000),
                         gaps=[(300, 150), (450, 150), (600, 150), (750, 150)])


# Testa a geração do percurso
def test_generated_gaps_strictly_increasing(field):
    xs = [x for x, _ in field.gaps]
    assert xs[0] == 300
    assert all(b > a for a, b in zip(xs, xs[1:]))
    assert xs[-1] < field.course_length

def test_generated_gap_centres_are_clamped(field):
    cfg = field.config
    ys = [y for _, y in field.gaps]
    assert abs(ys[0] - cfg.initial_gap_y) <= cfg.max_gap_delta
    assert all(abs(b - a) <= cfg.max_gap_delta for a, b in zip(ys, ys[1:]))
    assert all(cfg.gap_y_range[0] <= y < cfg.gap_y_range[1] for y in ys)

def test_spacing_shrinks_over_distance(field):
    xs = np.array([x for x, _ in field.gaps])
    steps = np.diff(xs)
    # o espaçamento extra começa em ~107 e some depois de ~37 vãos
    assert steps[:5].min() >= 94 + 95
    assert steps[-5:].max() < 124

def test_generation_is_reproducible_with_seed():
    a = ObstacleField(rng=np.random.default_rng(3))
    b = ObstacleField(rng=np.random.default_rng(3))
    assert a.gaps == b.gaps

def test_fixed_gaps_survive_reset(fixed_field):
    before = list(fixed_field.gaps)
    fixed_field.scroll = 500
    fixed_field.reset()
    assert fixed_field.scroll == 0
    assert fixed_field.gaps == before

def test_fixed_gaps_must_increase():
    with pytest.raises(ValueError):
        ObstacleField(gaps=[(300, 150), (300, 160)])

def test_advance_until_course_exhausted():
    field = ObstacleField(CourseConfig(course_length=5), gaps=[])
    results = [field.advance() for _ in range(6)]
    assert results == [False] * 5 + [True]


# Testa a escolha dos obstáculos mais próximos
def test_closest_obstacles_limit_and_order(fixed_field):
    rects = fixed_field.closest_obstacles(280.0, lookahead=1000.0)
    assert len(rects) == 6
    assert [r.left for r in rects] == [300, 300, 450, 450, 600, 600]
    top, bottom = rects[0], rects[1]
    assert top == Rect(300.0, 0.0, 40.0, 110.0)
    assert bottom == Rect(300.0, 190.0, 40.0, 293.0 - 190.0)

def test_closest_obstacles_respects_lookahead(fixed_field):
    rects = fixed_field.closest_obstacles(100.0, lookahead=200.0)
    # alcance vai até 100 + 28 + 200 = 328: apenas o primeiro vão
    assert [r.left for r in rects] == [300, 300]

def test_closest_obstacles_skips_gaps_behind(fixed_field):
    rects = fixed_field.closest_obstacles(500.0, lookahead=300.0)
    assert [r.left for r in rects] == [600, 600, 750, 750]
    assert fixed_field.closest_obstacles(2000.0) == []


# Testa o modelo de colisão
def test_agent_inside_opening_survives():
    field = ObstacleField(gaps=[(100, 150)])
    result = field.collided(100.0, 150.0)
    assert result.collided is False
    assert result.score == 1
    assert result.gap_rect is None

def test_agent_touching_top_pipe_collides():
    field = ObstacleField(gaps=[(100, 150)])
    result = field.collided(100.0, 110.0)
    assert result.collided is True
    assert result.score == 1
    assert result.gap_rect == Rect(100.0, 110.0, 39.0, 80.0)

def test_gap_behind_counts_without_collision_check():
    field = ObstacleField(gaps=[(100, 150), (300, 150)])
    # y=0 bateria no cano se o vão fosse testado
    result = field.collided(200.0, 0.0)
    assert result.collided is False
    assert result.score == 1

def test_all_gaps_behind_counted_once():
    gaps = [(100, 150), (250, 120), (400, 90)]
    field = ObstacleField(gaps=gaps)
    assert field.collided(5000.0, 0.0).score == len(gaps)

def test_score_is_non_decreasing_along_course(fixed_field):
    scores = [fixed_field.collided(float(x), 150.0).score for x in range(0, 1000, 3)]
    assert all(b >= a for a, b in zip(scores, scores[1:]))
    assert scores[-1] == fixed_field.gap_count

def test_custom_hit_points(fixed_field):
    # um único ponto no centro do agente
    assert fixed_field.collided(300.0, 150.0, hit_points=[(5, 11)]).collided is False
    assert fixed_field.collided(300.0, 20.0, hit_points=[(5, 11)]).collided is True

def test_hit_point_constellation_size():
    assert len(HIT_POINTS) == 15
