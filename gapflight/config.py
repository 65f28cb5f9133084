"""config.py

Parâmetros ajustáveis da simulação. Os valores padrão foram escolhidos
empiricamente (campo de visão, limites de altura entre vãos, gravidade...) e
podem ser alterados sem quebrar nenhuma propriedade do treinamento.
"""
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class SensorConfig:
	sample_count: int = 7
	field_of_view: Tuple[float, float] = (-125.0, 125.0)  # graus
	depth: float = 300.0
	ceiling_y: float = 0.0
	floor_y: float = 294.0
	# deslocamento da origem do sensor em relação ao agente
	origin_offset: Tuple[float, float] = (14.0, 0.0)


@dataclass
class CourseConfig:
	course_length: int = 20000
	first_gap_x: int = 300          # garante uma "corrida" inicial sem obstáculos
	initial_spacing: int = 110      # diminui a cada vão, deixando o percurso mais difícil
	spacing_decrement: int = 3
	step_range: Tuple[int, int] = (94, 124)
	gap_y_range: Tuple[int, int] = (30, 259)
	initial_gap_y: int = 129
	max_gap_delta: int = 100        # diferença máxima entre centros consecutivos
	gap_jitter: int = 17
	gap_half_height: float = 40.0
	pipe_width: float = 40.0
	ground_y: float = 293.0
	lookahead: float = 300.0
	max_visible_gaps: int = 3
	agent_width: float = 28.0


@dataclass
class PhysicsConfig:
	start_x: float = 10.0
	start_y: float = 100.0
	gravity: float = 0.001
	min_acceleration: float = -1.0
	speed_range: Tuple[float, float] = (-2.0, 3.0)
	y_range: Tuple[float, float] = (0.0, 285.0)
	# velocidade e aceleração são divididas por este fator antes de entrar na rede
	input_scale: float = 3.0


@dataclass
class TrainerConfig:
	population_size: int = 24
	mutation_chance: int = 25       # percentual
	mutation_magnitude: float = 0.5
	hidden_layers: List[int] = field(default_factory=list)
	outputs: int = 1
	save_dir: str = "networks"
	sensor: SensorConfig = field(default_factory=SensorConfig)
	course: CourseConfig = field(default_factory=CourseConfig)
	physics: PhysicsConfig = field(default_factory=PhysicsConfig)

	@property
	def input_count(self) -> int:
		# uma entrada por raio + velocidade vertical + aceleração vertical
		return self.sensor.sample_count + 2

	@property
	def layer_sizes(self) -> List[int]:
		# sem camadas ocultas explícitas: uma camada oculta do tamanho da entrada
		hidden = list(self.hidden_layers) or [self.input_count]
		return [self.input_count] + hidden + [self.outputs]


default_config = TrainerConfig()
