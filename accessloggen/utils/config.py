# defaults < yaml file < cli flags
import copy, yaml
from accessloggen.utils.errors import ConfigError

DEFAULTS = {
    "generator": {"count": 100, "site_count": 10000, "sampler": "poisson", "seed": None},
    "bytes_sent": {"max": 10000000, "mean": 100000.0, "std_dev": 10000.0},
    "logging": {"encoding": "ltsv", "output": "stderr"},
    "choices": {},
}
SAMPLERS = ("poisson", "normal")
ENCODINGS = ("ltsv", "json")
OUTPUTS = ("stderr", "stdout")
CHOICE_FIELDS = ("status", "scheme", "cache")


def load_yaml(p):
    try:
        with open(p, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"cannot read config {p}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml in {p}: {e}") from e


def merge(base: dict, extra: dict) -> dict:
    out = copy.deepcopy(base)
    for section, values in (extra or {}).items():
        if section not in out or values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigError(f"section {section!r} must be a mapping")
        out[section].update(values)
    return out


def load_config(path=None, overrides=None) -> dict:
    cfg = copy.deepcopy(DEFAULTS)
    if path:
        data = load_yaml(path)
        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must be a mapping")
        cfg = merge(cfg, data)
    cfg = merge(cfg, overrides)
    validate_config(cfg)
    return cfg


def validate_config(cfg: dict):
    g = cfg["generator"]; b = cfg["bytes_sent"]; lg = cfg["logging"]
    try:
        for k in ("count", "site_count"):
            g[k] = int(g[k])
        b["max"] = int(b["max"])
        b["mean"] = float(b["mean"]); b["std_dev"] = float(b["std_dev"])
        if g["seed"] is not None:
            g["seed"] = int(g["seed"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"bad numeric setting: {e}") from e
    if g["count"] < 0: raise ConfigError(f"count must be >= 0, got {g['count']}")
    if g["site_count"] < 1: raise ConfigError(f"site_count must be >= 1, got {g['site_count']}")
    if b["max"] < 0: raise ConfigError(f"bytes_sent.max must be >= 0, got {b['max']}")
    if g["sampler"] not in SAMPLERS: raise ConfigError(f"unknown sampler: {g['sampler']!r}")
    if lg["encoding"] not in ENCODINGS: raise ConfigError(f"unknown log encoding: {lg['encoding']!r}")
    if lg["output"] not in OUTPUTS: raise ConfigError(f"unknown output: {lg['output']!r}")
    for name, pairs in cfg["choices"].items():
        if name not in CHOICE_FIELDS:
            raise ConfigError(f"unknown choice table: {name!r}")
        if not isinstance(pairs, list) or not all(isinstance(p, (list, tuple)) and len(p) == 2 for p in pairs):
            raise ConfigError(f"choices.{name} must be a list of [weight, value] pairs")
    return cfg
