"""Court geometry, ball physics and AI constants for the ping/pong simulator.

Units are court cells (columns, rows) per tick; delays are milliseconds.
"""

# Court grid
WIDTH = 76
HEIGHT = 20
NET_POSITION = WIDTH // 2

# Playable rows for the ball (walls bounce at these limits)
TOP_WALL = 1.0
BOTTOM_WALL = float(HEIGHT - 2)

# Paddles
PADDLE_SIZE = 3.0  # half height
PADDLE_CENTER = HEIGHT / 2
PADDLE_SPEED = 0.5
PADDLE_DEAD_ZONE = 0.1
AI_JITTER = 1.0
LEFT_PADDLE_X = 0
RIGHT_PADDLE_X = WIDTH - 1

# Where the ball sits when served and where it lands after a return
LEFT_SERVE_X = 1.0
RIGHT_SERVE_X = float(WIDTH - 2)
LEFT_RETURN_X = 3.0
RIGHT_RETURN_X = float(WIDTH - 4)

# Speed bounds
MIN_ALLOWED_SPEED = 5.5
MAX_ALLOWED_SPEED = 10.0
HIT_SPEEDUP = 1.05

# Spin
SPIN_COUPLING = 0.02
SPIN_BOUNCE_DECAY = 0.7
SPIN_FROM_OFFSET = 1.5
DY_FROM_OFFSET = 0.8
WALL_RESTITUTION = 0.95

# Serve launch ranges
SERVE_DX_RANGE = (1.0, 1.8)
SERVE_DY_RANGE = (-0.7, 0.7)

# Net clip
NET_CLIP_PROBABILITY = 0.15
NET_REFLECT_PROBABILITY = 0.2
NET_REFLECT_DAMPING = 0.8
NET_FORWARD_DAMPING = 0.6
NET_MIN_DX_BOOST = 1.2
NET_WEAK_RETURN_PROBABILITY = 0.7
NET_PERTURBATION = 0.2
NET_TELEPORT = 2

# Miss model
MISS_PROBABILITY_BASE = 0.15
DIFFICULTY_SCALING = 0.08
OFFSET_SCALING = 0.15
MISS_PROBABILITY_FLOOR = 0.05
MISS_PROBABILITY_CEILING = 0.95
MISS_OFFSET_RANGE = (1.5, 2.5)

# Stall recovery
STALL_EPSILON = 0.01
STALL_TICKS = 5
STALL_BOOST = 1.5

# Match rules
MAX_SCORE = 11
SERVE_ROTATION = 2  # points per server

# Pacing
BASE_FRAME_DELAY_MS = 80
FRAME_VARIATION_MS = 40
POINT_PAUSE_MS = 1000
BANNER_PAUSE_MS = 1000

SIDE_LABELS = ("ping", "pong")
