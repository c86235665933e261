"""
Default configuration for the annotation engine.

Every threshold lives here so the geometry heuristics can be tuned
without touching code. Entries can be overridden from the environment,
see :func:`load_config`.
"""

import os
from typing import Dict, Optional

from easydict import EasyDict as edict

from .utils.env import load_cfg_from_env


def default_config() -> edict:
    cfg = edict()

    cfg.stroke = edict()
    # a sample is kept when it is newer than the last one by more than
    # time_epsilon or farther away than distance_epsilon (pixels)
    cfg.stroke.time_epsilon = 0.0
    cfg.stroke.distance_epsilon = 0.5

    cfg.classifier = edict()

    cfg.classifier.zigzag = edict()
    cfg.classifier.zigzag.min_points = 10
    cfg.classifier.zigzag.noise_threshold = 5.0
    cfg.classifier.zigzag.min_flips = 3

    cfg.classifier.circle = edict()
    cfg.classifier.circle.min_points = 15
    cfg.classifier.circle.min_aspect = 0.6
    cfg.classifier.circle.max_closure = 0.5
    cfg.classifier.circle.strict = True
    cfg.classifier.circle.min_quadrants = 3
    cfg.classifier.circle.min_consistency = 0.6

    cfg.classifier.square = edict()
    cfg.classifier.square.min_points = 20
    cfg.classifier.square.min_aspect = 0.7
    cfg.classifier.square.corner_step = 5
    cfg.classifier.square.corner_angle = 60.0
    cfg.classifier.square.min_corners = 3
    cfg.classifier.square.max_closure = 0.3

    cfg.session = edict()
    cfg.session.default_tool = "adaptive"
    cfg.session.max_history = 100
    # most recent samples the classifier looks at during a stroke
    cfg.session.max_window = 256

    return cfg


def load_config(env: Optional[Dict[str, str]] = None) -> edict:
    """Default configuration with ``FLUSH_*`` environment overrides applied."""
    if env is None:
        env = dict(os.environ)
    return load_cfg_from_env(default_config(), env)
