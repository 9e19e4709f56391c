"""
Run configuration for ga_core.

Loads YAML run configurations, validates them, and builds the engine and
its components (selectors, alterers, executor, genotype factory, fitness
function) from the validated dictionary.

Configuration layout:

    run:
      generations: 100        # or steady_fitness: 20 (at least one)
      seed: 42                # optional
      output: outputs/run     # optional, statistics CSV and plot
      plot: true              # optional
    engine:
      optimize: maximum
      population_size: 50
      maximal_phenotype_age: 70
      offspring_fraction: 0.6
      executor: {type: thread, workers: 4}
    selectors:
      survivor: {type: tournament, sample_size: 3}
      offspring: {type: roulette_wheel}
    alterers:
      - {type: single_point_crossover, probability: 0.1}
      - {type: mutator, probability: 0.05}
    genotype:
      - {type: bit, length: 20, p: 0.5}
    fitness:
      function: "ga_core.problems:count_ones"
      scaler: {type: exponential, c: 2}
"""

import importlib
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from . import random_registry
from .alterer import Alterer, CompositeAlterer
from .chromosome import (
    BitChromosome, CharacterChromosome, Chromosome, DoubleChromosome,
    IntegerChromosome, PermutationChromosome,
)
from .concurrency import SerialExecutor
from .crossover import MeanAlterer, MultiPointCrossover, SinglePointCrossover
from .engine import GeneticAlgorithm
from .genotype import Genotype, GenotypeFactory
from .mutation import Mutator, SwapMutator
from .optimize import Optimize
from .phenotype import identity
from .scaler import ExponentialScaler
from .selector import (
    BoltzmannSelector, ExponentialRankSelector, LinearRankSelector,
    RouletteWheelSelector, Selector, StochasticUniversalSelector,
    TournamentSelector, TruncationSelector,
)

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


SELECTORS: Dict[str, Callable[..., Selector]] = {
    "roulette_wheel": RouletteWheelSelector,
    "stochastic_universal": StochasticUniversalSelector,
    "linear_rank": LinearRankSelector,
    "exponential_rank": ExponentialRankSelector,
    "boltzmann": BoltzmannSelector,
    "tournament": TournamentSelector,
    "truncation": TruncationSelector,
}

ALTERERS: Dict[str, Callable[..., Alterer]] = {
    "single_point_crossover": SinglePointCrossover,
    "multi_point_crossover": MultiPointCrossover,
    "mean_alterer": MeanAlterer,
    "mutator": Mutator,
    "swap_mutator": SwapMutator,
}

CHROMOSOMES: Dict[str, Callable[..., Chromosome]] = {
    "bit": BitChromosome.of,
    "character": CharacterChromosome.of,
    "integer": IntegerChromosome.of,
    "double": DoubleChromosome.of,
    "permutation": PermutationChromosome.of_integer,
}

EXECUTORS = ("serial", "thread")


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid YAML or empty
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration must be a mapping")

    logger.info("Loaded run configuration from %s", config_file)
    return config


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Only the shape and the value ranges are checked here; component
    parameters are checked again by the component constructors.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    for field in ['run', 'genotype', 'fitness']:
        if field not in config:
            raise ConfigValidationError(f"Missing required field: '{field}'")

    _validate_run_section(config['run'])
    _validate_engine_section(config.get('engine', {}))
    _validate_selectors_section(config.get('selectors', {}))
    _validate_alterers_section(config.get('alterers'))
    _validate_genotype_section(config['genotype'])
    _validate_fitness_section(config['fitness'])


def _validate_run_section(run: Any) -> None:
    if not isinstance(run, dict):
        raise ConfigValidationError("'run' must be a dictionary")

    if 'generations' not in run and 'steady_fitness' not in run:
        raise ConfigValidationError(
            "'run' requires 'generations' or 'steady_fitness' (or both)"
        )

    for field in ['generations', 'steady_fitness']:
        if field in run:
            value = run[field]
            if not _is_int(value) or value <= 0:
                raise ConfigValidationError(
                    f"'run.{field}' must be a positive integer, got: {value}"
                )

    if 'seed' in run and run['seed'] is not None and not _is_int(run['seed']):
        raise ConfigValidationError(f"'run.seed' must be an integer, got: {run['seed']}")


def _validate_engine_section(engine: Any) -> None:
    if not isinstance(engine, dict):
        raise ConfigValidationError("'engine' must be a dictionary")

    if 'optimize' in engine:
        try:
            Optimize.parse(engine['optimize'])
        except ValueError as e:
            raise ConfigValidationError(f"'engine.optimize': {e}")

    for field in ['population_size', 'maximal_phenotype_age']:
        if field in engine:
            value = engine[field]
            if not _is_int(value) or value <= 0:
                raise ConfigValidationError(
                    f"'engine.{field}' must be a positive integer, got: {value}"
                )

    if 'offspring_fraction' in engine:
        fraction = engine['offspring_fraction']
        if not _is_number(fraction) or not 0.0 <= fraction <= 1.0:
            raise ConfigValidationError(
                f"'engine.offspring_fraction' must be within [0, 1], got: {fraction}"
            )

    if 'executor' in engine:
        executor = engine['executor']
        _require_type(executor, 'engine.executor', EXECUTORS)
        workers = executor.get('workers', 1)
        if not _is_int(workers) or workers <= 0:
            raise ConfigValidationError(
                f"'engine.executor.workers' must be a positive integer, got: {workers}"
            )


def _validate_selectors_section(selectors: Any) -> None:
    if not isinstance(selectors, dict):
        raise ConfigValidationError("'selectors' must be a dictionary")

    unknown = set(selectors) - {'survivor', 'offspring'}
    if unknown:
        raise ConfigValidationError(f"Unknown selector role(s): {sorted(unknown)}")

    for role, spec in selectors.items():
        _require_type(spec, f'selectors.{role}', SELECTORS)


def _validate_alterers_section(alterers: Any) -> None:
    if alterers is None:
        return
    if not isinstance(alterers, list) or not alterers:
        raise ConfigValidationError("'alterers' must be a non-empty list")
    for i, spec in enumerate(alterers):
        _require_type(spec, f'alterers[{i}]', ALTERERS)


def _validate_genotype_section(genotype: Any) -> None:
    if not isinstance(genotype, list) or not genotype:
        raise ConfigValidationError("'genotype' must be a non-empty list of chromosomes")
    for i, spec in enumerate(genotype):
        _require_type(spec, f'genotype[{i}]', CHROMOSOMES)


def _validate_fitness_section(fitness: Any) -> None:
    if not isinstance(fitness, dict):
        raise ConfigValidationError("'fitness' must be a dictionary")

    function = fitness.get('function')
    if not isinstance(function, str) or ':' not in function:
        raise ConfigValidationError(
            f"'fitness.function' must be of the form 'module:attribute', got: {function}"
        )

    scaler = fitness.get('scaler')
    if scaler is not None and scaler != 'identity':
        _require_type(scaler, 'fitness.scaler', ('exponential',))


def _require_type(spec: Any, name: str, known) -> None:
    if not isinstance(spec, dict):
        raise ConfigValidationError(f"'{name}' must be a dictionary")
    if 'type' not in spec:
        raise ConfigValidationError(f"Missing required field: '{name}.type'")
    if spec['type'] not in known:
        raise ConfigValidationError(
            f"Invalid {name}.type: '{spec['type']}'. Must be one of {sorted(known)}"
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _params(spec: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in spec.items() if k != 'type'}


def _build(registry: Dict[str, Callable], spec: Dict[str, Any], name: str) -> Any:
    try:
        return registry[spec['type']](**_params(spec))
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"Invalid parameters for {name} '{spec['type']}': {e}")


def build_selector(spec: Dict[str, Any]) -> Selector:
    """
    Build a selector from `{type: <name>, <param>: <value>, ...}`.

    Raises:
        ConfigValidationError: If the type is unknown or the parameters are invalid
    """
    _require_type(spec, 'selector', SELECTORS)
    return _build(SELECTORS, spec, 'selector')


def build_alterer(specs: List[Dict[str, Any]]) -> Alterer:
    """
    Build the engine alterer from a list of alterer specs.

    A single spec yields that alterer, several yield a CompositeAlterer
    applying them in order.
    """
    alterers = []
    for i, spec in enumerate(specs):
        _require_type(spec, f'alterers[{i}]', ALTERERS)
        alterers.append(_build(ALTERERS, spec, 'alterer'))
    if len(alterers) == 1:
        return alterers[0]
    return CompositeAlterer(alterers)


def build_executor(spec: Optional[Dict[str, Any]]) -> Executor:
    """
    Build the executor for the engine's parallel phases.

    `serial` (default) runs every task inline; `thread` uses a
    ThreadPoolExecutor with `workers` threads. The caller owns the returned
    executor and shuts it down.
    """
    if spec is None or spec.get('type', 'serial') == 'serial':
        return SerialExecutor()
    _require_type(spec, 'engine.executor', EXECUTORS)
    return ThreadPoolExecutor(max_workers=spec.get('workers', 1))


def build_genotype_factory(specs: List[Dict[str, Any]]) -> GenotypeFactory:
    """Build a genotype factory from a list of chromosome specs."""
    prototypes = []
    for i, spec in enumerate(specs):
        _require_type(spec, f'genotype[{i}]', CHROMOSOMES)
        prototypes.append(_build(CHROMOSOMES, spec, 'chromosome'))
    try:
        return Genotype.factory(*prototypes)
    except TypeError as e:
        raise ConfigValidationError(f"Invalid genotype: {e}")


def build_fitness_scaler(spec: Any) -> Callable[[Any], Any]:
    if spec is None or spec == 'identity':
        return identity
    _require_type(spec, 'fitness.scaler', ('exponential',))
    return _build({'exponential': ExponentialScaler}, spec, 'scaler')


def resolve_fitness_function(reference: str) -> Callable:
    """
    Import a fitness function given as 'package.module:attribute'.

    Raises:
        ConfigValidationError: If the module or attribute cannot be found
    """
    module_name, _, attribute = reference.partition(':')
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigValidationError(f"Cannot import fitness module '{module_name}': {e}")

    function = getattr(module, attribute, None)
    if function is None or not callable(function):
        raise ConfigValidationError(
            f"Fitness function '{attribute}' not found in module '{module_name}'"
        )
    return function


def create_engine_from_config(config: Dict[str, Any]) -> GeneticAlgorithm:
    """
    Build a configured, not yet set up GeneticAlgorithm.

    If 'run.seed' is given, a seeded generator is installed process-wide
    with random_registry.set_random before anything random happens.

    Args:
        config: Validated run configuration

    Returns:
        GeneticAlgorithm ready for setup()
    """
    run = config['run']
    engine_config = config.get('engine', {})

    seed = run.get('seed')
    if seed is not None:
        random_registry.set_random(seed)
        logger.info("Using random seed %d", seed)

    fitness = config['fitness']
    ga = GeneticAlgorithm(
        build_genotype_factory(config['genotype']),
        resolve_fitness_function(fitness['function']),
        build_fitness_scaler(fitness.get('scaler')),
        Optimize.parse(engine_config.get('optimize', Optimize.MAXIMUM)),
        build_executor(engine_config.get('executor')),
    )

    if 'population_size' in engine_config:
        ga.population_size = engine_config['population_size']
    if 'maximal_phenotype_age' in engine_config:
        ga.maximal_phenotype_age = engine_config['maximal_phenotype_age']
    if 'offspring_fraction' in engine_config:
        ga.offspring_fraction = engine_config['offspring_fraction']

    selectors = config.get('selectors', {})
    if 'survivor' in selectors:
        ga.survivor_selector = build_selector(selectors['survivor'])
    if 'offspring' in selectors:
        ga.offspring_selector = build_selector(selectors['offspring'])

    if config.get('alterers'):
        ga.alterer = build_alterer(config['alterers'])

    logger.info(
        "Created engine: population=%d, offspring_fraction=%.3f, optimize=%s",
        ga.population_size, ga.offspring_fraction, ga.optimize.value
    )
    return ga
