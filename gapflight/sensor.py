"""sensor.py

Sensor de proximidade em leque: lança `sample_count` raios a partir do agente
e informa, por raio, quão perto está a aresta de obstáculo mais próxima
(0 = nada no alcance, 1 = encostado).
"""
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .geometry import Point, Rect, clamp, distance, segment_intersection


class ProximitySensor:
	def __init__(self,
				 sample_count: int = 7,
				 field_of_view: Tuple[float, float] = (-125.0, 125.0),
				 depth: float = 300.0,
				 ceiling_y: float = 0.0,
				 floor_y: float = 294.0):
		if int(sample_count) < 1:
			raise ValueError("sample_count precisa ser >= 1")
		self.sample_count = int(sample_count)
		self.field_of_view = (float(field_of_view[0]), float(field_of_view[1]))
		self.depth = float(depth)
		self.ceiling_y = float(ceiling_y)
		self.floor_y = float(floor_y)

		start, end = self.field_of_view
		if self.sample_count == 1:
			# um único raio aponta para o meio do campo de visão
			self._angles = np.array([(start + end) / 2.0])
		else:
			self._angles = np.linspace(start, end, self.sample_count)
		rad = np.radians(self._angles)
		self._directions = np.column_stack([np.cos(rad), np.sin(rad)])

		# usados apenas pelo overlay de depuração
		self.last_rays: List[Tuple[Point, Point]] = []
		self.last_hits: List[Tuple[Point, Point]] = []

	@classmethod
	def from_config(cls, cfg) -> "ProximitySensor":
		return cls(sample_count=cfg.sample_count,
				   field_of_view=cfg.field_of_view,
				   depth=cfg.depth,
				   ceiling_y=cfg.ceiling_y,
				   floor_y=cfg.floor_y)

	@property
	def angles(self) -> List[float]:
		return [float(a) for a in self._angles]

	def read(self, obstacles: Iterable[Rect], origin: Point) -> np.ndarray:
		"""Lê o sensor a partir de `origin` contra os retângulos candidatos.

		Cada raio é testado contra as quatro arestas de cada retângulo e contra
		o chão e o teto. A saída por raio é `1 - clamp(dist / depth, 0, 1)` da
		interseção mais próxima, ou 0 se nada for atingido.
		"""
		ox, oy = float(origin[0]), float(origin[1])
		origin = (ox, oy)
		segments = [edge for rect in obstacles for edge in rect.edges()]
		# chão e teto cobrem todo o alcance horizontal do sensor
		segments.append(((ox - self.depth, self.floor_y), (ox + self.depth, self.floor_y)))
		segments.append(((ox - self.depth, self.ceiling_y), (ox + self.depth, self.ceiling_y)))

		output = np.zeros(self.sample_count, dtype=float)
		self.last_rays = []
		self.last_hits = []
		for i, (dx, dy) in enumerate(self._directions):
			ray_end = (ox + float(dx) * self.depth, oy + float(dy) * self.depth)
			self.last_rays.append((origin, ray_end))
			nearest, hit = self._nearest_hit(origin, ray_end, segments)
			output[i] = 1.0 - nearest
			if hit is not None and output[i] > 0.0:
				self.last_hits.append((origin, hit))
		return output

	def _nearest_hit(self, origin: Point, ray_end: Point, segments) -> Tuple[float, Optional[Point]]:
		# distância normalizada; 1.0 = nada encontrado
		nearest = 1.0
		hit = None
		for a, b in segments:
			point = segment_intersection(origin, ray_end, a, b)
			if point is None:
				continue
			norm = clamp(distance(origin, point), 0.0, self.depth) / self.depth
			# estritamente menor: em empate fica a primeira encontrada
			if norm < nearest:
				nearest = norm
				hit = point
		return nearest, hit
