"""diagrammer: recover, render and publish model-generated diagrams."""

__version__ = "0.1.0"
