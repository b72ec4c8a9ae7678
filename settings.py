"""
settings.py - Tuning constants for Chaos Brawler.

All configurable values live here so they're easy to tweak
and easy to reference from any module.  Every duration is
expressed in simulation ticks (one tick per rendered frame).
"""

# ── Screen ────────────────────────────────────────────────
SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
FPS = 60
TITLE = "Chaos Brawler – Beach Rumble"
BG_COLOR = (30, 30, 30)

# ── Arena (logical coordinate space) ─────────────────────
ARENA_LEFT = 20                # player x lower bound
ARENA_RIGHT = SCREEN_WIDTH - 20
ARENA_RIGHT_TRANSITION = 850   # player may walk off-screen while "GO!"
ARENA_TOP = 250                # top of the walkable sand band
ARENA_BOTTOM = 580
ARENA_EXIT_X = SCREEN_WIDTH - 40   # crossing this ends a transition
HORIZON_Y = 250

# ── Actor body ────────────────────────────────────────────
ACTOR_WIDTH = 40
ACTOR_HEIGHT = 60
ACTOR_SPEED = 4.0
VELOCITY_DAMPING = 0.8         # exponential friction per tick

# ── Damage reaction ──────────────────────────────────────
HIT_STUN_TICKS = 15            # Hit state hold (also the death-animation window)
HIT_INVULN_TICKS = 30          # i-frames after taking damage
KNOCKBACK_IMPULSE = 12.0       # divided by actor scale

# ── Attack geometry ──────────────────────────────────────
JAB_REACH = 35
STRAIGHT_REACH = 55
ATTACK_HITBOX_HEIGHT = 30
ATTACK_HITBOX_Y_FRAC = 0.8     # hitbox top, as a fraction of body height above feet

# ── Player ────────────────────────────────────────────────
PLAYER_MAX_HP = 100
PLAYER_SPEED = 5.5
PLAYER_START_X = 100
PLAYER_START_Y = 450
DODGE_SPEED_MULT = 2.8
PLAYER_DODGE_IFRAMES = 35

# ── Player special: "Chaos Pulse" ────────────────────────
SPECIAL_CHARGE_TICKS = 45
SPECIAL_ACTIVE_TICKS = 60
SPECIAL_COOLDOWN_TICKS = 60 * 15
SPECIAL_MAX_RADIUS = 250.0

# ── Enemy ─────────────────────────────────────────────────
ENEMY_MAX_HP = 30
ENEMY_SPEED_MIN = 1.5
ENEMY_SPEED_RANGE = 2.0
BOSS_SPEED_MULT = 0.7
ENGAGE_DISTANCE = 80           # scaled by enemy scale
ATTACK_INTERVAL = 40           # eligible AI ticks between attack rolls
BOSS_ATTACK_INTERVAL = 20
STRAIGHT_CHANCE = 0.6          # remainder are jabs
WINDUP_TICKS = 15

ENEMY_DODGE_CHANCE = 0.12
BOSS_DODGE_CHANCE = 0.35
ENEMY_DODGE_TICKS = 25
ENEMY_DODGE_COOLDOWN = 120

# ── Boss abilities ────────────────────────────────────────
HEAVY_BOSS_MIN_HP = 500        # bosses this tough also cast projectiles
BOSS_ABILITY_CHANCE = 0.02     # per eligible tick

BLAST_TRIGGER_DISTANCE = 180
BLAST_CHARGE_TICKS = 60
BLAST_GROW_TICKS = 60
BLAST_COOLDOWN_TICKS = 350
BLAST_MAX_RADIUS = 180.0       # scaled by boss scale

VOLLEY_TRIGGER_DISTANCE = 150
VOLLEY_CAST_TICKS = 60
VOLLEY_EMIT_INTERVAL = 20
VOLLEY_COOLDOWN_TICKS = 450

# ── Projectiles ───────────────────────────────────────────
PROJECTILE_SPEED = 7.0
PROJECTILE_LIFETIME = 140
PROJECTILE_STRAIGHT_TICKS = 60 # no homing until this age
PROJECTILE_DRAG = 0.96
PROJECTILE_HOMING_PULL = 0.45
PROJECTILE_SPAWN_RISE = 45     # emitted from above the boss's feet
PROJECTILE_HIT_RADIUS = 25
PLAYER_AIM_RISE = 30           # projectiles aim at the torso, not the feet

# ── Director: damage table ───────────────────────────────
JAB_DAMAGE = 9
STRAIGHT_DAMAGE = 18
SPECIAL_DAMAGE = 15
ENEMY_MELEE_DAMAGE = 6
BLAST_DAMAGE = 10
PROJECTILE_DAMAGE = 15
HITSTOP_TICKS = 8

# ── Director: scoring ────────────────────────────────────
ENEMY_CHAOS = 20
BOSS_CHAOS = 750
STREAK_PER_MULTIPLIER = 5
MAX_MULTIPLIER = 10

# ── Phases ────────────────────────────────────────────────
PHASE_COUNT = 5
PHASE_TARGETS = (100, 1000, 3000, 5000, 10000)
BOSS_PHASES = {
    3: (200, 2.0),             # phase: (max hp, scale)
    5: (500, 2.5),
}
SPECIAL_UNLOCK_PHASE = 3
PHASE_HEAL = 50
POPULATION_NORMAL = 3
POPULATION_LATE = 5            # from phase 3 onward
LATE_PHASE = 3
BOSS_ENTOURAGE = 5             # living actors after a boss entrance
ALT_PALETTE_PHASE = 4

# ── Spawning ──────────────────────────────────────────────
SPAWN_LEFT_X = -150
SPAWN_RIGHT_X = 950
SPAWN_Y_MIN = 250
SPAWN_Y_RANGE = 330
BOSS_SPAWN_X = SCREEN_WIDTH + 120
BOSS_SPAWN_Y = 450

# ── Colors (R, G, B) ─────────────────────────────────────
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
PLAYER_COLOR = (59, 130, 246)
ENEMY_COLOR = (239, 68, 68)
ENEMY_ALT_COLOR = (168, 85, 247)
BOSS_COLOR = (253, 230, 138)
SKY_COLOR = (3, 105, 161)
SKY_NIGHT_COLOR = (2, 6, 23)
SAND_COLOR = (253, 230, 138)
SAND_NIGHT_COLOR = (30, 41, 59)
PULSE_COLOR = (168, 85, 247)
BLAST_COLOR = (255, 255, 0)
ORB_COLOR = (244, 114, 182)
GREEN = (34, 197, 94)
RED = (239, 68, 68)
GRAY = (60, 60, 60)
YELLOW = (255, 220, 60)

# ── Font ──────────────────────────────────────────────────
FONT_SIZE = 22
SMALL_FONT_SIZE = 18

# ── Session statistics ───────────────────────────────────
STATS_SAMPLE_INTERVAL = 60     # ticks between chaos-score samples
