"""pygame viewer for AtomSim."""
