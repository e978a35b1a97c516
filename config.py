#loading preset by using config.py file
#all durations are in milliseconds

#Setup pool for bubble to spawn in, the HUD band on top is kept clear
POOL_WIDTH, POOL_HEIGHT = 800, 600
HUD_HEIGHT = 60
FPS = 60

#Set bubble Max & Min size (diameter)
BUBBLE_MIN_SIZE = 40
BUBBLE_MAX_SIZE = 80

#Size bands to point value, smaller bubbles are worth more
SCORE_BANDS = (
    (45, 100),
    (50, 75),
    (55, 50),
    (60, 35),
    (65, 25),
    (70, 20),
    (75, 15),
)
SCORE_FLOOR = 10

#Bubble type chances, anything above the last band is a normal bubble
SLOWTIME_CHANCE = 0.05
DOUBLESCORE_CHANCE = 0.05
LIFE_CHANCE = 0.10

#Bubble animation and lifetime
GROWTH_MS = 600
GROWTH_START_SCALE = 0.15
SHRINK_MS = 300
BUBBLE_LIFETIME_MS = 1700
SLOWTIME_LIFETIME_FACTOR = 2

#Setup Bubble spawn rate
SPAWN_INTERVAL_MS = 800
SLOWTIME_SPAWN_FACTOR = 1.5

#Powerups
SLOWTIME_DURATION_MS = 20000
DOUBLESCORE_DURATION_MS = 15000
DOUBLESCORE_MULTIPLIER = 2
POWERUP_QUEUE_CAPACITY = 5
POWERUP_POLL_MS = 100

#Lives
STARTING_LIVES = 3
MAX_LIVES = 10

#Score service
SCORE_SERVER_PORT = 5555
LEADERBOARD_LIMIT = 100
MAX_MESSAGE_SIZE = 1 << 20
