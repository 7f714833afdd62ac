#!/usr/bin/env python3
"""
Configuration system for cmdshell
Supports YAML files, CLI overrides, and programmatic access for embedding applications
"""

import yaml
import argparse
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from copy import deepcopy

from cmdshell.dispatcher import CommandError, DEFAULT_PROMPT


class ConfigurationError(CommandError):
	"""A configuration file exists but could not be read or parsed"""


@dataclass
class ShellSettings:
	"""Dispatcher and driving loop settings"""
	prompt: str = DEFAULT_PROMPT
	unique_names: bool = False  # reject duplicate command names at startup
	stop_on_error: bool = False  # driving loop exits on the first failed command

	def to_dict(self) -> Dict[str, Any]:
		"""Convert to dictionary for YAML serialization"""
		return {
			'prompt': self.prompt,
			'unique_names': self.unique_names,
			'stop_on_error': self.stop_on_error
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'ShellSettings':
		"""Create from dictionary (YAML loading)"""
		return cls(
			prompt=data.get('prompt', DEFAULT_PROMPT),
			unique_names=data.get('unique_names', False),
			stop_on_error=data.get('stop_on_error', False)
		)


@dataclass
class ConsoleConfig:
	"""Console messages logging level configuration"""
	verbose: bool = False
	quiet: bool = False
	log_level: Optional[str] = None  # overrides verbose/quiet when set

	def to_dict(self) -> Dict[str, Any]:
		return {
			'verbose': self.verbose,
			'quiet': self.quiet,
			'log_level': self.log_level
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'ConsoleConfig':
		return cls(
			verbose=data.get('verbose', False),
			quiet=data.get('quiet', False),
			log_level=data.get('log_level')
		)


@dataclass
class CmdShellConfig:
	"""Complete configuration for cmdshell"""
	shell: ShellSettings = field(default_factory=ShellSettings)
	console: ConsoleConfig = field(default_factory=ConsoleConfig)

	# Metadata
	config_version: str = "1.0"
	description: str = "cmdshell configuration"

	def to_dict(self) -> Dict[str, Any]:
		"""Convert to dictionary for YAML serialization"""
		return {
			'config_version': self.config_version,
			'description': self.description,
			'shell': self.shell.to_dict(),
			'console': self.console.to_dict(),
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'CmdShellConfig':
		"""Create from dictionary (YAML loading)"""
		config = cls()

		if 'config_version' in data:
			config.config_version = str(data['config_version'])
		if 'description' in data:
			config.description = data['description']

		if 'shell' in data:
			config.shell = ShellSettings.from_dict(data['shell'] or {})
		if 'console' in data:
			config.console = ConsoleConfig.from_dict(data['console'] or {})

		return config


_KNOWN_SECTIONS = {'config_version', 'description', 'shell', 'console'}

_SECTION_KEYS = {
	'shell': {'prompt', 'unique_names', 'stop_on_error'},
	'console': {'verbose', 'quiet', 'log_level'},
}

_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def configure_logging(console: ConsoleConfig):
	"""Set up root logging from console settings"""
	if console.log_level:
		level = getattr(logging, console.log_level.upper())
	elif console.verbose:
		level = logging.DEBUG
	elif console.quiet:
		level = logging.WARNING
	else:
		level = logging.INFO

	logging.basicConfig(
		level=level,
		format='%(asctime)s %(levelname)s %(name)s: %(message)s'
	)
	return level


class ConfigurationManager:
	"""
	Manages configuration loading, merging, and validation
	"""

	def __init__(self, config_file: Optional[str] = None):
		self.config_file = config_file
		self.config = None
		self.config_file_path = None

		self.logger = logging.getLogger(__name__)

		# Standard config file locations (in order of preference)
		self.config_search_paths = [
			Path.cwd() / "cmdshell.yaml",  # Current directory
			Path.cwd() / "config" / "cmdshell.yaml",  # Config subdirectory
			Path.home() / ".config" / "cmdshell" / "config.yaml",  # User config
			Path("/etc/cmdshell/config.yaml"),  # System config (Linux)
		]

	def load_config(self, config_file: Optional[str] = None) -> CmdShellConfig:
		"""
		Load configuration from file with fallback chain

		Args:
			config_file: Specific config file path, or None for auto-discovery

		Returns:
			Loaded configuration object (defaults if no file was found)

		Raises:
			ConfigurationError: the file exists but is not valid YAML or a section is not a mapping
		"""
		config_file = config_file or self.config_file
		if config_file:
			config_path = Path(config_file)
			if config_path.exists():
				self.config = self._load_yaml_file(config_path)
				self.config_file_path = config_path
				self.logger.info(f"Loaded config from: {config_path}")
			else:
				self.logger.warning(f"Config file not found: {config_path}")
				self.logger.info("Using default configuration")
		else:
			for path in self.config_search_paths:
				if path.exists():
					self.config = self._load_yaml_file(path)
					self.config_file_path = path
					self.logger.info(f"Auto-discovered config: {path}")
					break
			else:
				self.logger.info("No config file found, using defaults")

		if self.config is None:
			self.config = CmdShellConfig()
		return self.config

	def _load_yaml_file(self, file_path: Path) -> CmdShellConfig:
		"""Load configuration from YAML file"""
		try:
			with open(file_path, 'r') as f:
				yaml_data = yaml.safe_load(f) or {}
		except (OSError, yaml.YAMLError) as e:
			raise ConfigurationError(f"Error loading config file {file_path}: {e}") from e

		if not isinstance(yaml_data, dict):
			raise ConfigurationError(f"Config file {file_path} must contain a mapping")

		for key in yaml_data:
			if key not in _KNOWN_SECTIONS:
				self.logger.warning(f"Unknown config key '{key}' in {file_path}")

		for section, known_keys in _SECTION_KEYS.items():
			section_data = yaml_data.get(section)
			if section_data is None:
				continue
			if not isinstance(section_data, dict):
				raise ConfigurationError(f"Section '{section}' in {file_path} must contain a mapping")
			for key in section_data:
				if key not in known_keys:
					self.logger.warning(f"Unknown config key '{section}.{key}' in {file_path}")

		return CmdShellConfig.from_dict(yaml_data)

	def merge_cli_args(self, args: argparse.Namespace) -> CmdShellConfig:
		"""
		Merge CLI arguments into configuration (CLI takes precedence)

		Args:
			args: Parsed command line arguments

		Returns:
			Updated configuration
		"""
		if self.config is None:
			self.config = CmdShellConfig()

		# Shell settings
		if getattr(args, 'prompt', None) is not None:
			self.config.shell.prompt = args.prompt
		if getattr(args, 'unique_names', False):
			self.config.shell.unique_names = True
		if getattr(args, 'stop_on_error', False):
			self.config.shell.stop_on_error = True

		# Console settings
		if getattr(args, 'verbose', False):
			self.config.console.verbose = True
		if getattr(args, 'quiet', False):
			self.config.console.quiet = True
		if getattr(args, 'log_level', None):
			self.config.console.log_level = args.log_level

		return self.config

	def save_config(self, file_path: Optional[str] = None) -> bool:
		"""
		Save current configuration to YAML file

		Args:
			file_path: Target file path, or None to use loaded file path

		Returns:
			True if saved successfully
		"""
		if file_path:
			target_path = Path(file_path)
		elif self.config_file_path:
			target_path = self.config_file_path
		else:
			target_path = Path("cmdshell.yaml")

		try:
			target_path.parent.mkdir(parents=True, exist_ok=True)

			with open(target_path, 'w') as f:
				f.write("# cmdshell configuration\n")
				f.write("# Generated configuration file\n")
				f.write(f"# Version: {self.config.config_version}\n\n")

				yaml.dump(self.config.to_dict(), f,
						  default_flow_style=False,
						  sort_keys=False,
						  indent=2)

			self.logger.info(f"Configuration saved to: {target_path}")
			return True

		except OSError as e:
			self.logger.error(f"Error saving config to {target_path}: {e}")
			return False

	def create_sample_config(self, file_path: str = "cmdshell_sample.yaml") -> bool:
		"""Create a sample configuration file with comments"""
		try:
			with open(file_path, 'w') as f:
				f.write(self._generate_sample_yaml())

			self.logger.info(f"Sample configuration created: {file_path}")
			return True

		except OSError as e:
			self.logger.error(f"Error creating sample config: {e}")
			return False

	def _generate_sample_yaml(self) -> str:
		"""Generate sample YAML with comments"""
		return f"""# cmdshell configuration file

# =============================================================================
# SHELL SETTINGS
# =============================================================================
shell:
  prompt: "{DEFAULT_PROMPT}"          # Printed before every command line
  unique_names: false             # Refuse to start when two commands share a name
  stop_on_error: false            # Leave the loop on the first failed command

# =============================================================================
# CONSOLE MESSAGES LOGGING LEVEL
# =============================================================================
console:
  verbose: false                  # Verbose output (DEBUG)
  quiet: false                    # Quiet mode (WARNING and above)
  log_level: null                 # Explicit level, overrides verbose/quiet

# =============================================================================
# CONFIGURATION METADATA
# =============================================================================
config_version: "1.0"
description: "cmdshell configuration"
"""

	def validate_config(self) -> tuple[bool, list[str]]:
		"""
		Validate configuration for common issues

		Returns:
			(is_valid, list_of_errors)
		"""
		errors = []

		if not isinstance(self.config.shell.prompt, str):
			errors.append(f"Prompt must be a string, got {self.config.shell.prompt!r}")

		log_level = self.config.console.log_level
		if log_level is not None and str(log_level).upper() not in _LOG_LEVELS:
			errors.append(f"Invalid log_level: {log_level}. Must be one of {', '.join(_LOG_LEVELS)}")

		if self.config.console.verbose and self.config.console.quiet:
			errors.append("verbose and quiet cannot both be enabled")

		return len(errors) == 0, errors

	def get_config(self) -> CmdShellConfig:
		"""Get current configuration"""
		return deepcopy(self.config)


def create_argument_parser():
	"""Argument parser for the cmdshell driving loop"""
	parser = argparse.ArgumentParser(
		prog='cmdshell',
		description='A minimalistic interactive command shell',
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  %(prog)s                                 # Default prompt and settings
  %(prog)s -p "demo> "                     # Custom prompt
  %(prog)s -c my_config.yaml               # Use specific config file
  %(prog)s --create-config sample.yaml     # Create sample config file

Configuration:
  Configuration is loaded in this order (later overrides earlier):
  1. Built-in defaults
  2. Configuration file (YAML)
  3. Command line arguments

  Config file search order:
  - cmdshell.yaml (current directory)
  - config/cmdshell.yaml
  - ~/.config/cmdshell/config.yaml
  - /etc/cmdshell/config.yaml
		"""
	)

	# Configuration file handling
	config_group = parser.add_argument_group('Configuration')
	config_group.add_argument(
		'-c', '--config',
		type=str,
		help='Configuration file path (YAML format)'
	)
	config_group.add_argument(
		'--create-config',
		type=str,
		metavar='FILE',
		help='Create sample configuration file and exit'
	)
	config_group.add_argument(
		'--save-config',
		type=str,
		metavar='FILE',
		help='Save current configuration to file'
	)

	# Shell settings
	shell_group = parser.add_argument_group('Shell Settings')
	shell_group.add_argument(
		'-p', '--prompt',
		type=str,
		help='Prompt printed before each command line'
	)
	shell_group.add_argument(
		'--unique-names',
		action='store_true',
		help='Refuse to start when two commands share a name'
	)
	shell_group.add_argument(
		'--stop-on-error',
		action='store_true',
		help='Exit on the first command that fails'
	)

	# Debug settings
	debug_group = parser.add_argument_group('Debug Options')
	debug_group.add_argument(
		'-v', '--verbose',
		action='store_true',
		help='Enable verbose debug output'
	)
	debug_group.add_argument(
		'-q', '--quiet',
		action='store_true',
		help='Quiet mode (minimal output)'
	)
	debug_group.add_argument(
		'--log-level',
		type=str.upper,
		choices=_LOG_LEVELS,
		help='Explicit logging level'
	)

	return parser


def setup_configuration(argv=None) -> tuple[Optional[CmdShellConfig], bool, Optional[ConfigurationManager]]:
	"""
	Setup configuration system with CLI integration

	Args:
		argv: Command line arguments (None for sys.argv)

	Returns:
		(config_object, should_exit, config_manager)
	"""
	logger = logging.getLogger(__name__)

	parser = create_argument_parser()
	args = parser.parse_args(argv)

	# Handle special commands first
	if args.create_config:
		manager = ConfigurationManager()
		if manager.create_sample_config(args.create_config):
			print(f"Sample configuration created: {args.create_config}")
			print(f"Edit the file and run again with: -c {args.create_config}")
		return None, True, None

	manager = ConfigurationManager(args.config)
	manager.load_config()

	# CLI overrides config file
	config = manager.merge_cli_args(args)

	is_valid, errors = manager.validate_config()
	if not is_valid:
		print("Configuration errors:")
		for error in errors:
			print(f"  ✗ {error}")
		return config, True, manager

	if args.save_config:
		if manager.save_config(args.save_config):
			logger.info(f"Configuration saved to: {args.save_config}")

	return config, False, manager
