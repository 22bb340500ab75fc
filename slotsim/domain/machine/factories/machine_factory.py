# slotsim/domain/machine/factories/machine_factory.py
import logging
import os
from typing import Dict, Any, Optional

from ..entities.machine_config import MachineConfig
from ..entities.slot_machine import SlotMachine

MACHINE_SCHEMA = os.path.join(
    os.path.dirname(__file__), "..", "..", "..", "infrastructure", "config", "schemas", "machine_schema.json"
)


class MachineFactory:
    """
    Factory for machine configurations and SlotMachine instances.
    """
    def __init__(self, rng_provider=None):
        """
        Initialize the machine factory.

        Args:
            rng_provider: Optional RNG provider for creating random sources
        """
        self.logger = logging.getLogger("domain.machine.factory")
        self.rng_provider = rng_provider

    def create_config(self, config: Dict[str, Any], machine_id: Optional[str] = None) -> MachineConfig:
        """
        Build an immutable configuration from a machine document.

        Raises:
            ConfigurationError: If the document is invalid
        """
        config_obj = MachineConfig.from_dict(config, machine_id)
        self.logger.debug(
            f"Machine config {config_obj.name}: {config_obj.reel_count}x{config_obj.row_count}, "
            f"{config_obj.payline_count} paylines"
        )
        return config_obj

    def load_config(self, config_loader, file_path: str, machine_id: Optional[str] = None) -> MachineConfig:
        """
        Load and validate a machine configuration file.

        Args:
            config_loader: YamlConfigLoader instance
            file_path: Path to the machine YAML file
            machine_id: Optional explicit machine ID (overrides ID in config)

        Returns:
            Immutable MachineConfig
        """
        self.logger.info(f"Loading machine config from file: {file_path}")
        config = config_loader.load_file(file_path, os.path.normpath(MACHINE_SCHEMA))

        if machine_id is None:
            machine_id = config.get("machine_id", None)
            if machine_id is None:
                machine_id = os.path.splitext(os.path.basename(file_path))[0]

        return self.create_config(config, machine_id)

    def create_machine(self, config: MachineConfig, rng_strategy_name: str = "mersenne",
                       seed: Optional[int] = None) -> SlotMachine:
        """
        Create a slot machine with its own random source.

        Args:
            config: Machine configuration
            rng_strategy_name: Name of RNG strategy to use
            seed: Optional RNG seed

        Returns:
            Initialized SlotMachine instance
        """
        self.logger.info(f"Creating slot machine: {config.name}")

        random_source = None
        if self.rng_provider:
            random_source = self.rng_provider.get_rng(rng_strategy_name, seed)
            self.logger.debug(f"Using RNG strategy: {rng_strategy_name}, seed: {seed}")
        else:
            self.logger.warning("No RNG provider available, machine will need RNG set later")

        return SlotMachine(config, random_source)
