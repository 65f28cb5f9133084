"""network.py

Rede neural feedforward usada como "cérebro" de cada agente. Os pesos e
vieses ficam em arrays numpy de forma fixa, criados uma única vez a partir de
`layer_sizes`; a evolução altera apenas os valores (mutação e cópia).

Formato do arquivo salvo (um valor por linha):
	fitness
	vieses, camada a camada (inclui a camada de entrada, que é inerte)
	pesos, camada -> neurônio -> neurônio da camada anterior
"""
import logging
import os
from typing import List, Optional, Sequence

import numpy as np
from numpy.random import default_rng


logger = logging.getLogger(__name__)

INIT_RANGE = 0.5


class NetworkShapeError(ValueError):
	"""Forma de rede inválida ou incompatível (construção, entrada, cópia)."""


class NetworkLoadError(ValueError):
	"""Arquivo salvo ilegível ou com quantidade de valores diferente da rede."""


def _validate_layers(layer_sizes: Sequence[int]) -> List[int]:
	sizes = list(layer_sizes)
	# entrada + ao menos uma oculta + saída
	if len(sizes) < 3:
		raise NetworkShapeError(f"são necessárias ao menos 3 camadas, recebido {sizes}")
	for s in sizes:
		if isinstance(s, bool) or not isinstance(s, (int, np.integer)) or s < 1:
			raise NetworkShapeError(f"tamanho de camada inválido: {s!r}")
	return [int(s) for s in sizes]


class FeedforwardNetwork:
	def __init__(self, network_id: int, layer_sizes: Sequence[int], rng: Optional[np.random.Generator] = None):
		self.id = int(network_id)
		self.layer_sizes = tuple(_validate_layers(layer_sizes))
		self.rng = rng if rng is not None else default_rng()
		self.fitness = 0.0

		# buffers de forma fixa
		self.activations = [np.zeros(n, dtype=float) for n in self.layer_sizes]
		self.biases = [self.rng.uniform(-INIT_RANGE, INIT_RANGE, n) for n in self.layer_sizes]
		self.weights = [
			self.rng.uniform(-INIT_RANGE, INIT_RANGE, (n, prev))
			for prev, n in zip(self.layer_sizes[:-1], self.layer_sizes[1:])
		]

	def __repr__(self) -> str:
		return f"FeedforwardNetwork(id={self.id}, layers={list(self.layer_sizes)}, fitness={self.fitness})"

	@property
	def parameter_count(self) -> int:
		# apenas parâmetros que influenciam a saída (sem os vieses da entrada)
		return sum(b.size for b in self.biases[1:]) + sum(w.size for w in self.weights)

	def feed_forward(self, inputs: Sequence[float]) -> np.ndarray:
		x = np.asarray(inputs, dtype=float)
		if x.shape != (self.layer_sizes[0],):
			raise NetworkShapeError(
				f"esperadas {self.layer_sizes[0]} entradas, recebido forma {x.shape}")
		self.activations[0][:] = x
		for layer in range(1, len(self.layer_sizes)):
			np.tanh(self.weights[layer - 1].dot(self.activations[layer - 1]) + self.biases[layer],
					out=self.activations[layer])
		return self.activations[-1].copy()

	def mutate(self, percent_chance: int, magnitude: float) -> int:
		"""Perturba vieses e pesos, garantindo que algo seja sorteado.

		Cada parâmetro é sorteado com probabilidade `percent_chance / 100` e
		recebe um ruído uniforme em [-magnitude, +magnitude]. Se nenhum for
		sorteado, a passada inteira é repetida. Com `magnitude == 0` os
		parâmetros são sorteados mas os valores não mudam.

		Retorna a quantidade de parâmetros perturbados.
		"""
		if not 0 < percent_chance <= 100:
			raise ValueError(f"percent_chance deve estar em (0, 100], recebido {percent_chance}")
		p = percent_chance / 100.0
		magnitude = float(magnitude)

		# os vieses da camada de entrada não participam do cálculo
		params = self.biases[1:] + self.weights
		while True:
			changed = 0
			for arr in params:
				mask = self.rng.random(arr.shape) < p
				count = int(mask.sum())
				if count:
					arr[mask] += self.rng.uniform(-magnitude, magnitude, count)
					changed += count
			if changed:
				return changed

	def copy_from(self, other: "FeedforwardNetwork") -> None:
		"""Copia vieses e pesos de `other` (id e fitness são preservados)."""
		if other.layer_sizes != self.layer_sizes:
			raise NetworkShapeError(
				f"não é possível copiar {list(other.layer_sizes)} em {list(self.layer_sizes)}")
		for dst, src in zip(self.biases, other.biases):
			dst[:] = src
		for dst, src in zip(self.weights, other.weights):
			dst[:] = src

	def hash(self) -> float:
		# impressão digital barata: colisões são aceitáveis
		total = 0.0
		for w in self.weights:
			total += float(w.sum())
		for b in self.biases[1:]:
			total += float(b.sum())
		return total

	def _values(self) -> List[float]:
		values = [float(self.fitness)]
		for b in self.biases:
			values.extend(float(v) for v in b)
		for w in self.weights:
			values.extend(float(v) for v in w.ravel())
		return values

	def save(self, path) -> None:
		# repr garante leitura exata do float
		with open(path, "w", encoding="utf-8") as fh:
			for v in self._values():
				fh.write(repr(v) + "\n")
		logger.debug("network %d saved to %s", self.id, path)

	def load(self, path) -> bool:
		"""Carrega fitness, vieses e pesos de `path`.

		Arquivo ausente não é erro: retorna False sem alterar nada. Se o
		arquivo tiver valores ilegíveis ou em quantidade diferente da forma da
		rede, levanta `NetworkLoadError` sem modificar a rede.
		"""
		if not os.path.exists(path):
			return False
		try:
			with open(path, "r", encoding="utf-8") as fh:
				values = [float(line) for line in fh if line.strip()]
		except ValueError as exc:
			# UnicodeDecodeError também é ValueError
			raise NetworkLoadError(f"{path}: valor inválido ({exc})") from exc

		expected = 1 + sum(b.size for b in self.biases) + sum(w.size for w in self.weights)
		if len(values) != expected:
			raise NetworkLoadError(
				f"{path}: {len(values)} valores, a rede {list(self.layer_sizes)} precisa de {expected}")

		self.fitness = values[0]
		idx = 1
		for b in self.biases:
			b[:] = values[idx:idx + b.size]
			idx += b.size
		for w in self.weights:
			w[:] = np.reshape(values[idx:idx + w.size], w.shape)
			idx += w.size
		logger.debug("network %d loaded from %s", self.id, path)
		return True

	def formula(self, max_neurons: int = 50) -> str:
		"""Expressão Python equivalente à primeira saída da rede.

		A expressão usa `math.tanh` e `inputs[i]`, permitindo usar a rede
		treinada sem esta biblioteca.
		"""
		if sum(self.layer_sizes) > max_neurons:
			raise ValueError(f"rede grande demais para exportar ({sum(self.layer_sizes)} neurônios)")

		terms = [f"inputs[{i}]" for i in range(self.layer_sizes[0])]
		for layer in range(1, len(self.layer_sizes)):
			w = self.weights[layer - 1]
			b = self.biases[layer]
			layer_terms = []
			for n in range(self.layer_sizes[layer]):
				products = " + ".join(f"({float(w[n, k])!r} * {terms[k]})" for k in range(len(terms)))
				layer_terms.append(f"math.tanh({products} + {float(b[n])!r})")
			terms = layer_terms
		return terms[0].replace("+ -", "- ")
