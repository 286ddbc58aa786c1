import math

# Connectivity settings
# Allow 8-directional (diagonal) movement by default
ALLOW_DIAGONAL = False
# Cost multiplier for a step that changes both coordinates
DIAGONAL_COST = math.sqrt(2)

# Grid settings
# Cells with this weight (or lower) are not part of the graph
BLOCKED = 0
# Map file: JSON definition of the default grid (relative to the gridpath package)
MAP_FILE = 'maps/default.json'
