# rubik_drag/__init__.py
"""Simulador 3D de cubo Rubik con resolución de gestos de drag a notación."""

__version__ = "0.2.0"
