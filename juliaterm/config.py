import json
from typing import Any, Dict, Optional

from juliaterm.animator import DEFAULT_SEED, AnimatorConfig

DEFAULTS: Dict[str, Any] = {
    "max_iters": 120,
    "base": [-0.8, 0.156],
    "radius": 0.40,
    "accel_strength": 1.2,
    "damping": 0.85,
    "target_fps": 60.0,
    "seed": DEFAULT_SEED,
    "width": 80,
    "height": 24,
    "record_frames": 600,
    "record_dt": 1.0 / 60.0,
}

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    cfg = dict(DEFAULTS)
    if config_path:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                user = json.load(f)
        except FileNotFoundError as e:
            raise ValueError(f"Config file not found: {config_path}") from e
        if not isinstance(user, dict):
            raise ValueError("Config JSON must be an object.")
        unknown = sorted(set(user) - set(DEFAULTS))
        if unknown:
            raise ValueError(f"Unknown config field(s): {', '.join(unknown)}")
        cfg.update(user)
    return cfg

def _parse_seed(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 0)
    return int(value)

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(DEFAULTS)
    out.update({k: v for k, v in cfg.items() if v is not None})

    for key in ("max_iters", "width", "height", "record_frames"):
        out[key] = int(out[key])
        if out[key] <= 0:
            raise ValueError(f"{key} must be positive.")

    for key in ("radius", "target_fps", "record_dt", "accel_strength"):
        out[key] = float(out[key])
    if out["radius"] <= 0 or out["target_fps"] <= 0:
        raise ValueError("radius/target_fps must be positive.")
    if out["record_dt"] < 0 or out["accel_strength"] < 0:
        raise ValueError("record_dt/accel_strength must not be negative.")

    out["damping"] = float(out["damping"])
    if not 0.0 <= out["damping"] <= 10.0:
        raise ValueError("damping must be within [0, 10].")

    base = out["base"]
    if not (isinstance(base, (list, tuple)) and len(base) == 2):
        raise ValueError("base must be [re, im].")
    out["base"] = [float(base[0]), float(base[1])]

    out["seed"] = _parse_seed(out["seed"])
    if out["seed"] < 0:
        raise ValueError("seed must not be negative.")
    return out

def animator_config(cfg: Dict[str, Any]) -> AnimatorConfig:
    return AnimatorConfig(
        base=complex(cfg["base"][0], cfg["base"][1]),
        radius=cfg["radius"],
        accel_strength=cfg["accel_strength"],
        damping=cfg["damping"],
    )
