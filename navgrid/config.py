# Screen settings
SCREEN_WIDTH = 960
SCREEN_HEIGHT = 600
FPS = 60
# Margin around the drawn grid (pixels)
SCREEN_MARGIN = 20

# World file: JSON definition of the obstacle layout
WORLD_FILE = 'worlds/default.json'

# Grid settings
# Half the edge length of one grid cell (map units)
NODE_RADIUS = 0.25
# Obstacle probe radius as a multiple of NODE_RADIUS: lower is more forgiving
OBSTACLE_DETECTION_SCALE = 1.0
# Accepted range for OBSTACLE_DETECTION_SCALE (exclusive min, inclusive max)
OBSTACLE_DETECTION_SCALE_MIN = 0.1
OBSTACLE_DETECTION_SCALE_MAX = 10.0
# Build the neighbor table once at startup instead of on every lookup
PRECALCULATE_NEIGHBORS = True
# Re-run the obstacle probe over the whole grid every simulation frame
RECALCULATE_WALKABLE_NODES = False

# Pathfinding settings
# Integer move costs indexed by the number of axes changed in one step.
# 10 for a face move, 14 ~ 10 * sqrt(2), 17 ~ 10 * sqrt(3)
MOVE_COSTS = {
    2: (10, 14),
    3: (10, 14, 17),
}
# Log elapsed milliseconds for every path found
PRINT_TIME_FOR_PATH = False
# Cap on expanded cells per search (None = unbounded)
MAX_SEARCH_ITERATIONS = None

# Agent settings
# Movement speed in map units per second
AGENT_SPEED = 5.0

# Debug gizmos
DISPLAY_GRID_GIZMOS = True
DISPLAY_ONLY_UNWALKABLE_GIZMOS = False
DISPLAY_PATH_GIZMOS = True

# Colors
BACKGROUND_COLOR = (20, 20, 20)
WALKABLE_COLOR = (255, 255, 255)
UNWALKABLE_COLOR = (255, 0, 0)
PATH_COLOR = (0, 255, 0)
AGENT_COLOR = (60, 140, 255)
TARGET_COLOR = (255, 200, 0)
