"""course.py

Campo de obstáculos rolante: uma sequência de vãos (x, centro vertical) entre
um cano superior e um inferior. O campo gera o percurso, avança a rolagem,
entrega os obstáculos mais próximos ao sensor e faz o teste de colisão.
"""
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from numpy.random import default_rng

from .config import CourseConfig
from .geometry import Rect


# constelação de pontos que aproxima a silhueta do agente (relativos ao sprite)
HIT_POINTS: Tuple[Tuple[int, int], ...] = (
	(1, 8), (14, 0), (26, 11), (13, 18), (23, 16),
	(21, 3), (8, 2), (4, 15), (9, 2), (23, 8),
	(25, 15), (17, 17), (7, 16), (2, 12), (3, 5),
)
# o sprite é desenhado 1px à esquerda e 11px acima da posição do agente
HIT_POINT_OFFSET = (-1.0, -11.0)


class CollisionResult(NamedTuple):
	collided: bool
	score: int
	gap_rect: Optional[Rect]


class ObstacleField:
	def __init__(self,
				 config: Optional[CourseConfig] = None,
				 rng: Optional[np.random.Generator] = None,
				 gaps: Optional[Sequence[Tuple[float, float]]] = None):
		self.config = config if config is not None else CourseConfig()
		self.rng = rng if rng is not None else default_rng()
		# vãos fixos (se fornecidos) são reaproveitados em toda geração
		self._fixed_gaps = _validate_gaps(gaps) if gaps is not None else None
		self.scroll = 0
		self.gaps: List[Tuple[float, float]] = []
		self.generate(self.config.course_length)

	@property
	def course_length(self) -> int:
		return self.config.course_length

	@property
	def gap_count(self) -> int:
		return len(self.gaps)

	def generate(self, course_length: int) -> List[Tuple[float, float]]:
		"""Gera os vãos por um passeio aleatório limitado.

		O espaçamento horizontal diminui ao longo do percurso e o centro do vão
		não se afasta mais que `max_gap_delta` do anterior (evita saltos
		impossíveis).
		"""
		cfg = self.config
		if self._fixed_gaps is not None:
			self.gaps = list(self._fixed_gaps)
			return self.gaps

		gaps = []
		spacing = cfg.initial_spacing
		last_y = cfg.initial_gap_y
		x = cfg.first_gap_x
		while x < course_length:
			if spacing > 0:
				spacing -= cfg.spacing_decrement
			new_y = int(self.rng.integers(cfg.gap_y_range[0], cfg.gap_y_range[1]))
			if new_y > last_y and new_y - last_y > cfg.max_gap_delta:
				new_y = last_y + cfg.max_gap_delta - int(self.rng.integers(0, cfg.gap_jitter))
			elif new_y < last_y and last_y - new_y > cfg.max_gap_delta:
				new_y = last_y - cfg.max_gap_delta + int(self.rng.integers(0, cfg.gap_jitter))
			gaps.append((float(x), float(new_y)))
			last_y = new_y
			x += int(self.rng.integers(cfg.step_range[0], cfg.step_range[1])) + spacing
		self.gaps = gaps
		return gaps

	def advance(self) -> bool:
		"""Rola uma unidade; True quando o percurso terminou."""
		self.scroll += 1
		return self.scroll > self.config.course_length

	def reset(self) -> None:
		self.scroll = 0
		self.generate(self.config.course_length)

	def pipe_rects(self, gap: Tuple[float, float]) -> Tuple[Rect, Rect]:
		cfg = self.config
		x, y = gap
		top = Rect(x, 0.0, cfg.pipe_width, y - cfg.gap_half_height)
		bottom = Rect(x, y + cfg.gap_half_height, cfg.pipe_width,
					  cfg.ground_y - y - cfg.gap_half_height)
		return top, bottom

	def opening_rect(self, gap: Tuple[float, float]) -> Rect:
		cfg = self.config
		x, y = gap
		return Rect(x, y - cfg.gap_half_height, cfg.pipe_width - 1, 2 * cfg.gap_half_height)

	def closest_obstacles(self, agent_x: float, lookahead: Optional[float] = None) -> List[Rect]:
		"""Retângulos dos canos dos próximos vãos, do mais perto ao mais longe.

		`agent_x` é a posição horizontal do agente no mundo (já com rolagem).
		Limitado a `max_visible_gaps` vãos para manter o custo do sensor fixo.
		"""
		cfg = self.config
		if lookahead is None:
			lookahead = cfg.lookahead
		left = agent_x - cfg.pipe_width
		right = agent_x + cfg.agent_width + lookahead
		result = []
		found = 0
		for gap in self.gaps:
			if gap[0] < left:
				continue
			found += 1
			if gap[0] > right or found > cfg.max_visible_gaps:
				break
			result.extend(self.pipe_rects(gap))
		return result

	def collided(self, agent_x: float, agent_y: float,
				 hit_points: Sequence[Tuple[float, float]] = HIT_POINTS) -> CollisionResult:
		"""Testa a colisão do agente e conta os vãos já alcançados.

		Vãos inteiramente atrás do agente contam para a pontuação mas não são
		testados. Vãos sobrepostos horizontalmente contam e são testados: basta
		um ponto da constelação fora da abertura para haver colisão.
		"""
		cfg = self.config
		left = agent_x - cfg.pipe_width
		right = agent_x + cfg.agent_width + 2
		score = 0
		collided = False
		gap_rect = None
		for gap in self.gaps:
			if gap[0] < left:
				score += 1
				continue
			if gap[0] > right:
				break
			score += 1
			if collided:
				continue
			opening = self.opening_rect(gap)
			for hx, hy in hit_points:
				px = hx + agent_x + HIT_POINT_OFFSET[0]
				py = hy + agent_y + HIT_POINT_OFFSET[1]
				# fora da faixa horizontal do cano: não há o que atingir
				if px >= opening.right or px <= opening.left:
					continue
				if not opening.contains(px, py):
					collided = True
					gap_rect = opening
					break
		return CollisionResult(collided, score, gap_rect)


def _validate_gaps(gaps: Sequence[Tuple[float, float]]) -> List[Tuple[float, float]]:
	result = [(float(x), float(y)) for x, y in gaps]
	for (x0, _), (x1, _) in zip(result, result[1:]):
		if x1 <= x0:
			raise ValueError("posições horizontais dos vãos devem ser estritamente crescentes")
	return result
