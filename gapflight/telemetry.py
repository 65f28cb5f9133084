"""telemetry.py

Registro opcional, em memória, do que cada agente viu e decidiu por tick.
Desligado, não guarda nada e não afeta a simulação.
"""
from typing import List, Sequence


class TelemetryRecorder:
	def __init__(self, enabled: bool = False, input_scale: float = 3.0):
		self.enabled = enabled
		self.input_scale = input_scale
		self.rows: List[List[float]] = []

	def __len__(self) -> int:
		return len(self.rows)

	def record(self, agent, inputs: Sequence[float], output: float, rectangles, world_x: float) -> None:
		if not self.enabled:
			return
		sensors = [float(v) for v in inputs[:-2]]
		# velocidade e aceleração entram na rede divididas pela escala; aqui desfazemos
		speed = float(inputs[-2]) * self.input_scale
		acceleration = float(inputs[-1]) * self.input_scale
		row = sensors + [speed, acceleration, float(output)]
		for rect in rectangles:
			# canos relativos ao agente
			rel = rect.offset(-world_x, -agent.y)
			row.extend([round(rel.left), round(rel.top), round(rel.right), round(rel.bottom)])
		self.rows.append(row)

	@staticmethod
	def header(sensor_angles: Sequence[float], max_pipes: int = 6) -> List[str]:
		columns = [f"sensor {round(a)} degrees" for a in sensor_angles]
		columns += ["vertical speed", "vertical acceleration", "output from neural network"]
		for i in range(1, max_pipes + 1):
			columns += [f"pipe-x1-{i}", f"pipe-y1-{i}", f"pipe-x2-{i}", f"pipe-y2-{i}"]
		return columns

	def clear(self) -> None:
		self.rows = []
