"""Neuroevolução de agentes que atravessam vãos de obstáculos."""
from .course import ObstacleField
from .genetic_algorithm import GenerationState, GeneticTrainer, Population
from .network import FeedforwardNetwork, NetworkLoadError, NetworkShapeError
from .sensor import ProximitySensor

__all__ = [
	"FeedforwardNetwork",
	"GenerationState",
	"GeneticTrainer",
	"NetworkLoadError",
	"NetworkShapeError",
	"ObstacleField",
	"Population",
	"ProximitySensor",
]
