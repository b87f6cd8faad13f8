"""siterisk - Oversharing risk scoring for collaboration sites."""

__version__ = "0.1.0"
