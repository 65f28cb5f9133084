"""genetic_algorithm.py

Algoritmo genético geracional que evolui as redes dos agentes. A cada tick o
campo de obstáculos rola e cada agente vivo sente, decide e se move; quando
todos morrem (ou alguém termina o percurso) a metade pior da população é
substituída por cópias mutadas da metade melhor e uma nova geração começa.

A população é um objeto explícito (`Population`) indexado por id; a seleção
opera sobre uma lista ordenada de ids e altera apenas os valores das redes,
nunca as chaves.
"""
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
import logging
import os
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .agent import Agent
from .config import TrainerConfig
from .course import ObstacleField
from .network import FeedforwardNetwork, NetworkLoadError
from .telemetry import TelemetryRecorder


logger = logging.getLogger(__name__)


class GenerationState(Enum):
	ACTIVE = "active"
	ALL_DEAD = "all_dead"
	COURSE_COMPLETE = "course_complete"

	@property
	def terminal(self) -> bool:
		return self is not GenerationState.ACTIVE


class Population:
	"""Conjunto fixo de N redes, uma por id em [0, N)."""

	def __init__(self, size: int, layer_sizes: Sequence[int], rng: Optional[np.random.Generator] = None):
		if int(size) < 1:
			raise ValueError("o tamanho da população precisa ser >= 1")
		self.rng = rng if rng is not None else np.random.default_rng()
		self.layer_sizes = tuple(layer_sizes)
		self._networks: Dict[int, FeedforwardNetwork] = {
			i: FeedforwardNetwork(i, self.layer_sizes, rng=self.rng) for i in range(int(size))
		}

	def __len__(self) -> int:
		return len(self._networks)

	def __getitem__(self, network_id: int) -> FeedforwardNetwork:
		return self._networks[network_id]

	def __iter__(self) -> Iterator[FeedforwardNetwork]:
		return iter(self._networks.values())

	@property
	def ids(self) -> List[int]:
		return list(self._networks.keys())

	def ranked(self) -> List[int]:
		"""Ids ordenados por fitness crescente (o melhor fica no fim)."""
		return sorted(self._networks, key=lambda i: self._networks[i].fitness)

	def best(self) -> FeedforwardNetwork:
		return self._networks[self.ranked()[-1]]

	@staticmethod
	def path_for(directory, network_id: int) -> str:
		return os.path.join(directory, f"network-{network_id}.ai")

	def save_all(self, directory) -> None:
		os.makedirs(directory, exist_ok=True)
		for network in self:
			network.save(self.path_for(directory, network.id))
		logger.info("saved %d networks to %s", len(self), directory)

	def load_all(self, directory) -> List[int]:
		"""Carrega as redes salvas; retorna os ids cujo arquivo falhou.

		Arquivos ausentes são ignorados. Falhas não interrompem a carga das
		demais redes.
		"""
		failed = []
		loaded = 0
		for network in self:
			try:
				if network.load(self.path_for(directory, network.id)):
					loaded += 1
			except NetworkLoadError as exc:
				logger.warning("unable to load network %d: %s", network.id, exc)
				failed.append(network.id)
		logger.info("loaded %d networks from %s (%d failed)", loaded, directory, len(failed))
		return failed


class GeneticTrainer:
	def __init__(self,
				 config: Optional[TrainerConfig] = None,
				 seed: Optional[int] = None,
				 population: Optional[Population] = None,
				 gaps: Optional[Sequence[Tuple[float, float]]] = None,
				 telemetry: bool = False,
				 workers: int = 1,
				 auto_advance: bool = True):
		self.config = config if config is not None else TrainerConfig()
		self.workers = max(1, int(workers))
		self.auto_advance = auto_advance
		self.telemetry_enabled = telemetry

		# sementes independentes para redes e percurso (reprodutível com `seed`)
		net_seed, course_seed = np.random.SeedSequence(seed).spawn(2)
		self.rng = np.random.default_rng(net_seed)
		self.population = population if population is not None else Population(
			self.config.population_size, self.config.layer_sizes, rng=self.rng)
		self.field = ObstacleField(self.config.course, rng=np.random.default_rng(course_seed), gaps=gaps)

		self.generation = 0
		self.completions = 0
		self.champion_id = -1
		self.history: List[float] = []
		self.state = GenerationState.ACTIVE
		self.agents: List[Agent] = []
		self._executor: Optional[ThreadPoolExecutor] = None
		self._create_agents()

	def __enter__(self) -> "GeneticTrainer":
		return self

	def __exit__(self, *exc) -> None:
		self.close()

	def close(self) -> None:
		"""Encerra o pool de threads, se houver."""
		if self._executor is not None:
			self._executor.shutdown(wait=True)
			self._executor = None

	def _create_agents(self) -> None:
		cfg = self.config
		self.agents = [
			Agent(network_id, physics=cfg.physics, sensor=cfg.sensor,
				  telemetry=TelemetryRecorder(self.telemetry_enabled, cfg.physics.input_scale))
			for network_id in self.population.ids
		]
		self.generation += 1
		self.state = GenerationState.ACTIVE

	def _step_agent(self, agent: Agent) -> bool:
		return agent.step(self.population[agent.id], self.field)

	def _step_all(self) -> None:
		if self.workers == 1:
			for agent in self.agents:
				self._step_agent(agent)
			return
		if self._executor is None:
			self._executor = ThreadPoolExecutor(max_workers=min(self.workers, len(self.agents)))
		# list() espera todos os agentes (barreira) e propaga exceções
		list(self._executor.map(self._step_agent, self.agents))

	@property
	def alive_count(self) -> int:
		return sum(1 for a in self.agents if a.alive)

	def tick(self) -> GenerationState:
		"""Avança a simulação um passo.

		Retorna o estado da geração após o passo. Com `auto_advance`, um estado
		terminal dispara `next_generation()` antes de retornar.
		"""
		if self.state.terminal:
			return self.state

		if self.field.advance():
			# alguém chegou ao fim: sucesso da população inteira
			self.completions += 1
			survivors = [a.id for a in self.agents if a.alive]
			if survivors:
				self.champion_id = survivors[-1]
			self.state = GenerationState.COURSE_COMPLETE
		else:
			self._step_all()
			if self.alive_count == 0:
				self.state = GenerationState.ALL_DEAD

		state = self.state
		if state.terminal and self.auto_advance:
			self.next_generation()
		return state

	def record_fitness(self) -> None:
		for agent in self.agents:
			self.population[agent.id].fitness = float(agent.score)

	def select(self) -> List[int]:
		"""Seleção por truncamento com elitismo.

		A metade pior (por posição no ranking, não por id) recebe uma cópia da
		rede de mesma posição na metade melhor e é mutada. A metade melhor não é
		alterada. Com N ímpar a rede do meio fica de fora. Retorna os ids
		sobrescritos.
		"""
		cfg = self.config
		ranked = self.population.ranked()
		half = len(ranked) // 2
		replaced = []
		for position in range(half):
			worst = self.population[ranked[position]]
			best = self.population[ranked[len(ranked) - half + position]]
			worst.copy_from(best)
			worst.mutate(cfg.mutation_chance, cfg.mutation_magnitude)
			replaced.append(worst.id)
		return replaced

	def next_generation(self) -> None:
		self.record_fitness()
		best = max(network.fitness for network in self.population)
		self.history.append(best)
		logger.info("generation %d finished (%s): best fitness = %.1f, completions = %d",
					self.generation, self.state.value, best, self.completions)
		self.select()
		self.field.reset()
		self._create_agents()

	def reset(self) -> None:
		"""Recomeça a geração atual sem seleção."""
		self.field.reset()
		self.generation -= 1
		self._create_agents()

	def save_all(self, directory: Optional[str] = None) -> None:
		self.population.save_all(directory or self.config.save_dir)

	def load_all(self, directory: Optional[str] = None) -> List[int]:
		return self.population.load_all(directory or self.config.save_dir)

	def run(self,
			generations: int = 100,
			on_generation: Optional[Callable[[int, "GeneticTrainer"], None]] = None,
			max_ticks: Optional[int] = None) -> Tuple[FeedforwardNetwork, float]:
		"""Roda `generations` gerações completas sem interface.

		`max_ticks` limita o total de ticks (útil em testes). Retorna a melhor
		rede e sua fitness ao final.
		"""
		target = self.generation + int(generations)
		ticks = 0
		while self.generation < target:
			if max_ticks is not None and ticks >= max_ticks:
				break
			state = self.tick()
			ticks += 1
			if not state.terminal:
				continue
			if not self.auto_advance:
				self.next_generation()
			if on_generation is not None:
				on_generation(self.generation - 1, self)
		best = self.population.best()
		return best, float(best.fitness)
