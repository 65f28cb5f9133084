"""agent.py

Agente transitório de uma geração: lê o sensor, consulta a rede, integra a
física vertical e testa a colisão. Cada agente só lê o próprio estado e o
campo de obstáculos (somente leitura), então passos de agentes diferentes
podem rodar em paralelo.
"""
from typing import List, Optional, Tuple

import numpy as np

from .config import PhysicsConfig, SensorConfig
from .course import ObstacleField
from .geometry import Rect, clamp
from .network import FeedforwardNetwork
from .sensor import ProximitySensor
from .telemetry import TelemetryRecorder


class Agent:
	def __init__(self,
				 agent_id: int,
				 physics: Optional[PhysicsConfig] = None,
				 sensor: Optional[SensorConfig] = None,
				 telemetry: Optional[TelemetryRecorder] = None):
		self.id = int(agent_id)
		self.physics = physics if physics is not None else PhysicsConfig()
		self.sensor_config = sensor if sensor is not None else SensorConfig()
		self.sensor = ProximitySensor.from_config(self.sensor_config)
		self.telemetry = telemetry if telemetry is not None else TelemetryRecorder(enabled=False)

		self.x = self.physics.start_x
		self.y = self.physics.start_y
		self.speed = 0.0
		self.acceleration = 0.0
		self.alive = True
		self.score = 0
		self.last_output = 0.0

	def __repr__(self) -> str:
		return f"Agent(id={self.id}, y={self.y:.1f}, alive={self.alive}, score={self.score})"

	def world_x(self, field: ObstacleField) -> float:
		return field.scroll + self.x

	def sense(self, field: ObstacleField) -> Tuple[np.ndarray, List[Rect]]:
		"""Entrada da rede: leituras do sensor + velocidade e aceleração."""
		wx = self.world_x(field)
		obstacles = field.closest_obstacles(wx)
		ox, oy = self.sensor_config.origin_offset
		readings = self.sensor.read(obstacles, (wx + ox, self.y + oy))
		scale = self.physics.input_scale
		return np.concatenate([readings, [self.speed / scale, self.acceleration / scale]]), obstacles

	def think(self, network: FeedforwardNetwork, field: ObstacleField) -> float:
		inputs, obstacles = self.sense(field)
		output = float(network.feed_forward(inputs)[0])
		# a saída da rede é o "bater de asas": aceleração para cima ou para baixo
		self.acceleration += output
		self.last_output = output
		self.telemetry.record(self, inputs, output, obstacles, self.world_x(field))
		return output

	def integrate(self) -> None:
		cfg = self.physics
		self.acceleration -= cfg.gravity
		if self.acceleration < cfg.min_acceleration:
			self.acceleration = cfg.min_acceleration
		# y cresce para baixo: aceleração positiva sobe
		self.speed = clamp(self.speed - self.acceleration, *cfg.speed_range)
		self.y = clamp(self.y + self.speed, *cfg.y_range)

	def step(self, network: FeedforwardNetwork, field: ObstacleField) -> bool:
		"""Um tick completo. Retorna True se o agente morreu neste tick."""
		if self.alive:
			self.think(network, field)
		# agentes mortos continuam caindo (apenas para exibição)
		self.integrate()
		if not self.alive:
			return False

		result = field.collided(self.world_x(field), self.y)
		self.score = max(self.score, result.score)
		if result.collided:
			self.crash(network)
			return True
		return False

	def crash(self, network: FeedforwardNetwork) -> None:
		self.acceleration = 0.0
		self.speed = 0.0
		self.alive = False
		network.fitness = float(self.score)
