from rubik_drag.core.cube_model import SOLVED_PATTERN, CubeModel

__all__ = ["CubeModel", "SOLVED_PATTERN"]
