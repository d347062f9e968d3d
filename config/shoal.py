"""Configuration for the 3D shoal flocking simulation."""

ENVIRONMENT = {
    "radius": 10.0,            # Cylinder radius around the vertical (y) axis
    "floor": -1.0,             # Lowest y an agent may reach
    "ceiling": 10.0,           # Highest y an agent may reach
}

BOIDS = {
    "count": 40,
    "speed": 0.01,             # Fixed displacement per tick
    "neighborhood_size": 6,    # K nearest neighbors used for flocking

    # Spawn cuboid (min, max) per axis
    "spawn_x": (-4.0, 4.0),
    "spawn_y": (1.0, 8.0),
    "spawn_z": (-4.0, 4.0),
}

BEHAVIOR = {
    # Distance thresholds
    "trigger_separate": 1.0,       # Repel from the closest neighbor below this
    "trigger_environment": 2.0,    # Avoid walls/floor/ceiling below this

    # Steering strengths
    "environment_strength": 0.1,
    "separation_strength": 0.005,
    "alignment_strength": 0.00125,
    "cohesion_strength": 0.002,

    "epsilon": 1e-6,               # Keeps 1 / d^2 finite as d -> 0
}

MARKER = {
    "apex": 2.0,
    "base": 1.0,
    "scale": 0.1,
}
