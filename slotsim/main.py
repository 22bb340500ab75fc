# slotsim/main.py
import os
import sys
import logging
import argparse
import time

from slotsim.infrastructure.config.loaders.yaml_loader import YamlConfigLoader
from slotsim.infrastructure.config.validators.schema_validator import SchemaValidator
from slotsim.infrastructure.logging.log_manager import initialize_logging
from slotsim.infrastructure.rng.rng_provider import RNGProvider
from slotsim.infrastructure.concurrency.task_executor import TaskExecutor, ExecutionMode

from slotsim.domain.exceptions import SlotSimError
from slotsim.domain.events.event_dispatcher import EventDispatcher
from slotsim.domain.machine.factories.machine_factory import MachineFactory

from slotsim.application.simulation.coordinator import SimulationCoordinator
from slotsim.application.analysis.report_generator import ReportGenerator

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG = os.path.join(PACKAGE_DIR, "application", "config", "simulation", "default_simulation.yaml")
SIMULATION_SCHEMA = os.path.join(PACKAGE_DIR, "infrastructure", "config", "schemas", "simulation_schema.json")


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Slot machine payline simulator")

    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG,
        help="Path to simulation configuration file"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the base RNG seed"
    )

    parser.add_argument(
        "--turns",
        type=int,
        default=None,
        help="Override max_turns per batch"
    )

    parser.add_argument(
        "--batches",
        type=int,
        default=None,
        help="Override the number of independent batches"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--no-concurrency",
        action="store_true",
        help="Run batches sequentially"
    )

    parser.add_argument(
        "--log-mode",
        choices=["all", "app", "domain", "none"],
        default=None,
        help="Select logging mode: 'all'=verbose, 'app'=application only, 'domain'=domain only, 'none'=minimal"
    )

    return parser.parse_args(argv)


def apply_overrides(config, args):
    """Fold command line overrides into the loaded simulation config."""
    if args.seed is not None:
        config.setdefault("rng", {})["seed"] = args.seed
    if args.turns is not None:
        config["max_turns"] = args.turns
    if args.batches is not None:
        config["batches"] = args.batches
    if args.no_concurrency:
        config["use_concurrency"] = False

    log_config = config.setdefault("logging", {})
    if args.log_mode:
        loggers = log_config.setdefault("loggers", {})

        if args.log_mode == "all":
            log_config["level"] = "DEBUG"
            log_config["console_level"] = "DEBUG"
        elif args.log_mode == "app":
            log_config["level"] = "WARNING"
            loggers["application"] = {"level": "DEBUG"}
            loggers["infrastructure"] = {"level": "DEBUG"}
            loggers["domain"] = {"level": "WARNING"}
        elif args.log_mode == "domain":
            log_config["level"] = "WARNING"
            loggers["domain"] = {"level": "DEBUG"}
            loggers["application"] = {"level": "WARNING"}
            loggers["infrastructure"] = {"level": "WARNING"}
        elif args.log_mode == "none":
            log_config["level"] = "WARNING"
            log_config["console_level"] = "WARNING"

    if args.verbose:
        log_config["level"] = "DEBUG"
        log_config["console_level"] = "DEBUG"

    return config


def resolve_machine_file(config, config_path):
    """Machine files are resolved relative to the simulation config."""
    machine_file = config["machine_file"]
    if os.path.isabs(machine_file):
        return machine_file
    return os.path.normpath(os.path.join(os.path.dirname(os.path.abspath(config_path)), machine_file))


def main(argv=None):
    """Main entry point for the slot simulator."""
    args = parse_arguments(argv)
    start_time = time.time()

    config_loader = YamlConfigLoader(SchemaValidator())

    try:
        config = config_loader.load_file(args.config, SIMULATION_SCHEMA, apply_defaults=True)
    except SlotSimError as e:
        print(f"Error loading configuration: {str(e)}", file=sys.stderr)
        return 1

    config = apply_overrides(config, args)

    initialize_logging(config.get("logging"))
    logger = logging.getLogger("main")

    logger.info("Starting slot simulator")
    logger.info(f"Configuration file: {args.config}")

    try:
        rng_provider = RNGProvider(config.get("rng", {}).get("strategy", "mersenne"))
        event_dispatcher = EventDispatcher()

        machine_factory = MachineFactory(rng_provider)
        machine_config = machine_factory.load_config(config_loader, resolve_machine_file(config, args.config))

        if machine_config.payout_table.is_fallback:
            logger.warning("Machine has no symbol table, simulating the fallback payouts")

        execution_mode = ExecutionMode.MULTITHREAD if config.get("use_concurrency", True) else ExecutionMode.SEQUENTIAL
        max_workers = config.get("max_workers")
        task_executor = TaskExecutor(execution_mode, max_workers=max_workers)
        logger.info(f"Task executor initialized: {execution_mode.name}, max_workers: {max_workers}")

        coordinator = SimulationCoordinator(machine_config, rng_provider, task_executor, event_dispatcher)
        results = coordinator.run_simulation(config)
        summary = results["summary"]

        logger.info("=" * 60)
        logger.info("SIMULATION STATISTICS")
        logger.info("=" * 60)
        logger.info(f"Batches: {summary['batches']} ({summary['aborted_batches']} aborted)")
        logger.info(f"Total turns: {summary['total_turns']:,}")
        logger.info(f"Total bet: {summary['total_bet']:,}")
        logger.info(f"Total won: {summary['total_won']:,}")
        logger.info(f"Overall RTP: {summary['rtp']:.2f}%")
        logger.info(f"Hit frequency: {summary['hit_frequency']:.2f}%")
        logger.info(f"Biggest win: {summary['biggest_win']:,}")

        output_config = config.get("output", {})
        if output_config.get("save_reports", True):
            report_generator = ReportGenerator(output_config.get("output_dir", "reports"))
            for report in results["reports"]:
                path = report_generator.save_report(report)
                logger.info(f"Report saved: {path}")
            report_generator.cleanup_old_reports(output_config.get("keep_reports", 50))

        logger.info(f"Total runtime: {time.time() - start_time:.2f} seconds")
        return 0

    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user")
        return 1
    except SlotSimError as e:
        logger.error(f"Simulation failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
