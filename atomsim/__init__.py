"""AtomSim: 2D atom-interaction and bonding simulation."""

__version__ = "0.1.0"
