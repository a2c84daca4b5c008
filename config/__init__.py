"""Configuration package for the fishdex core.

Provides a configuration system with support for:
- Multiple configuration sources (defaults, files, environment, CLI)
- Hierarchical configuration with proper precedence
- Type-safe configuration objects with validation
- Simplified access through facade pattern

Main components:
- config.py: Configuration dataclasses and loader
- service.py: Facade for simplified configuration access
- species_info.json: Bundled species reference dataset
- common_names.json: English -> German species aliases
"""
