"""geometry.py

Primitivas geométricas 2D usadas pelo sensor de proximidade e pelo modelo de
colisão. As coordenadas seguem a orientação de tela: x cresce para a direita
e y cresce para baixo.
"""
from dataclasses import dataclass
import math
from typing import Iterator, Optional, Tuple


Point = Tuple[float, float]
Segment = Tuple[Point, Point]


@dataclass(frozen=True)
class Rect:
	"""Retângulo alinhado aos eixos, (left, top) é o canto superior esquerdo."""
	left: float
	top: float
	width: float
	height: float

	@property
	def right(self) -> float:
		return self.left + self.width

	@property
	def bottom(self) -> float:
		return self.top + self.height

	def contains(self, x: float, y: float) -> bool:
		# semiaberto: as bordas direita e inferior não pertencem ao retângulo
		return self.left <= x < self.right and self.top <= y < self.bottom

	def edges(self) -> Iterator[Segment]:
		"""Devolve as quatro arestas na ordem esquerda, inferior, superior, direita."""
		top_left = (self.left, self.top)
		top_right = (self.right, self.top)
		bottom_left = (self.left, self.bottom)
		bottom_right = (self.right, self.bottom)
		yield top_left, bottom_left
		yield bottom_left, bottom_right
		yield top_left, top_right
		yield top_right, bottom_right

	def offset(self, dx: float, dy: float) -> "Rect":
		return Rect(self.left + dx, self.top + dy, self.width, self.height)


def clamp(value: float, low: float, high: float) -> float:
	return max(low, min(high, value))


def distance(a: Point, b: Point) -> float:
	return math.hypot(b[0] - a[0], b[1] - a[1])


def segment_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Optional[Point]:
	"""Interseção entre os segmentos p1-p2 e p3-p4.

	Retorna o ponto de cruzamento ou `None` quando os segmentos não se tocam.
	Segmentos paralelos (inclusive colineares) são tratados como sem interseção,
	o que basta para raios contra arestas de retângulos.
	"""
	s1x = p2[0] - p1[0]
	s1y = p2[1] - p1[1]
	s2x = p4[0] - p3[0]
	s2y = p4[1] - p3[1]

	denom = -s2x * s1y + s1x * s2y
	if denom == 0.0:
		return None

	s = (-s1y * (p1[0] - p3[0]) + s1x * (p1[1] - p3[1])) / denom
	t = (s2x * (p1[1] - p3[1]) - s2y * (p1[0] - p3[0])) / denom
	if 0.0 <= s <= 1.0 and 0.0 <= t <= 1.0:
		return p1[0] + t * s1x, p1[1] + t * s1y
	return None
