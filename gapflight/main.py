"""Runner simples (sem interface gráfica) para o treinador de `genetic_algorithm.py`.

Executar este arquivo treina a população por algumas gerações, imprime a
melhor fitness e, opcionalmente, salva as redes e a fórmula da campeã.
"""
import argparse
import logging

from gapflight.config import TrainerConfig
from gapflight.genetic_algorithm import GeneticTrainer


def run(args):
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.INFO,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	config = TrainerConfig(population_size=args.pop,
						   mutation_chance=args.mut_chance,
						   mutation_magnitude=args.mut_size,
						   save_dir=args.save_dir)
	config.sensor.sample_count = args.samples
	config.course.course_length = args.course

	with GeneticTrainer(config, seed=args.seed, workers=args.workers) as trainer:
		if args.load:
			failed = trainer.load_all()
			if failed:
				print(f"Não foi possível carregar as redes {failed}; mantendo pesos aleatórios.")

		def on_generation(gen, tr):
			if gen % max(1, args.gens // 10) == 0 or gen == args.gens:
				print(f"Generation {gen:4d}: best fitness = {tr.history[-1]:.1f} "
					  f"(completions = {tr.completions})")

		best, fitness = trainer.run(generations=args.gens, on_generation=on_generation)
		print("Best fitness:", fitness)
		print(best)

		if args.save:
			trainer.save_all()
		if args.formula:
			try:
				print(best.formula())
			except ValueError as exc:
				print(f"Fórmula indisponível: {exc}")


def parse_args(argv=None):
	p = argparse.ArgumentParser()
	p.add_argument("--pop", type=int, default=24, help="tamanho da população")
	p.add_argument("--gens", type=int, default=50, help="número de gerações")
	p.add_argument("--mut-chance", dest="mut_chance", type=int, default=25, help="chance de mutação por parâmetro (%%)")
	p.add_argument("--mut-size", dest="mut_size", type=float, default=0.5, help="magnitude máxima da mutação")
	p.add_argument("--samples", type=int, default=7, help="raios do sensor de proximidade")
	p.add_argument("--course", type=int, default=20000, help="comprimento do percurso")
	p.add_argument("--seed", type=int, help="seed aleatória")
	p.add_argument("--workers", type=int, default=1, help="threads para os passos dos agentes")
	p.add_argument("--save-dir", dest="save_dir", default="networks", help="diretório das redes salvas")
	p.add_argument("--load", action="store_true", help="carregar redes salvas antes de treinar")
	p.add_argument("--save", action="store_true", help="salvar as redes ao final")
	p.add_argument("--formula", action="store_true", help="imprimir a fórmula da melhor rede")
	p.add_argument("--verbose", action="store_true", help="log detalhado")
	return p.parse_args(argv)


if __name__ == '__main__':
	args = parse_args()
	run(args)
