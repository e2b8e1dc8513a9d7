# access log simulator: one structured record per iteration
import argparse, sys
from dataclasses import dataclass
from accessloggen.utils.config import DEFAULTS, ENCODINGS, OUTPUTS, SAMPLERS, load_config
from accessloggen.utils.errors import ConfigError, InvalidDistributionError, RandomSourceError
from accessloggen.utils.logger import STREAMS, get_logger, log_error, log_fields
from accessloggen.utils.randutil import Choice, Chooser, CryptoIntSource, SeededIntSource, choices_from_pairs
from accessloggen.producer.samplers import BytesSentSampler, norm_rand, rand_host

LOGGER_NAME = "accessloggen"
DEFAULT_COUNT = 100

STATUS_CHOICES = (Choice(70, 200), Choice(15, 301), Choice(5, 400), Choice(10, 404), Choice(5, 503))
SCHEME_CHOICES = (Choice(60, "https"), Choice(40, "http"))
CACHE_CHOICES = (Choice(60, "HIT"), Choice(20, "MISS"), Choice(20, "-"))


@dataclass
class AccessRecord:
    host: str = ""
    scheme: str = ""
    status: int = 0
    bytes_sent: int = 0
    cache: str = ""

    def to_fields(self) -> dict:
        return {
            "host": self.host,
            "http_host": self.host,
            "scheme": self.scheme,
            "status": self.status,
            "bytes_sent": self.bytes_sent,
            "sent_http_x_cache": self.cache,
        }


def build_source(cfg):
    seed = cfg["generator"]["seed"]
    return CryptoIntSource() if seed is None else SeededIntSource(seed)


def build_choosers(source, cfg):
    """Returns (scheme, status, cache) choosers; raises InvalidDistributionError."""
    tables = cfg.get("choices") or {}

    def table(name, default):
        return choices_from_pairs(tables[name]) if name in tables else default

    scheme: Chooser[str] = Chooser(source, table("scheme", SCHEME_CHOICES))
    status: Chooser[int] = Chooser(source, table("status", STATUS_CHOICES))
    cache: Chooser[str] = Chooser(source, table("cache", CACHE_CHOICES))
    return scheme, status, cache


def _draw(lg, fn, *args, default):
    try:
        return fn(*args)
    except RandomSourceError as e:
        log_error(lg, e)
        return default


def run(count=None, cfg=None, source=None, logger=None) -> int:
    cfg = cfg or load_config()
    if count is None:
        count = cfg["generator"].get("count", DEFAULT_COUNT)
    source = source or build_source(cfg)
    lg = logger or get_logger(LOGGER_NAME, cfg["logging"]["encoding"], STREAMS[cfg["logging"]["output"]]())
    scheme_c, status_c, cache_c = build_choosers(source, cfg)

    gen = cfg["generator"]; bs = cfg["bytes_sent"]
    sizes = BytesSentSampler(source)
    rng = getattr(source, "rng", None)

    def bytes_sent():
        if gen["sampler"] == "normal":
            return norm_rand(0, bs["max"], bs["mean"], bs["std_dev"], rng)
        return sizes.sample(bs["max"])

    d = AccessRecord()
    for _ in range(count):
        rec = AccessRecord(
            scheme=_draw(lg, scheme_c.choose, default=d.scheme),
            status=_draw(lg, status_c.choose, default=d.status),
            cache=_draw(lg, cache_c.choose, default=d.cache),
            host=_draw(lg, rand_host, source, gen["site_count"], default=d.host),
            bytes_sent=_draw(lg, bytes_sent, default=d.bytes_sent),
        )
        log_fields(lg, rec.to_fields())
    return count


def parse_args(argv=None):
    g = DEFAULTS["generator"]; b = DEFAULTS["bytes_sent"]
    ap = argparse.ArgumentParser(prog="accessloggen", description="Emit fabricated HTTP access log records.")
    ap.add_argument("--bytes-sent-mean", type=float, help=f"bytes_sent mean for the normal sampler (default {b['mean']:g})")
    ap.add_argument("--bytes-sent-std-dev", type=float, help=f"bytes_sent std dev for the normal sampler (default {b['std_dev']:g})")
    ap.add_argument("--bytes-sent-max", type=int, help=f"bytes_sent upper bound (default {b['max']})")
    ap.add_argument("--site-count", type=int, help=f"number of distinct hosts (default {g['site_count']})")
    ap.add_argument("--count", type=int, help=f"records to emit (default {g['count']})")
    ap.add_argument("--sampler", choices=SAMPLERS, help="bytes_sent distribution (default poisson)")
    ap.add_argument("--seed", type=int, help="use a seeded, non-cryptographic source")
    ap.add_argument("--encoding", choices=ENCODINGS, help="log encoding (default ltsv)")
    ap.add_argument("--output", choices=OUTPUTS, help="log stream (default stderr)")
    ap.add_argument("--config", help="yaml config file")
    return ap.parse_args(argv)


def overrides_from_args(args) -> dict:
    pick = lambda **kw: {k: v for k, v in kw.items() if v is not None}
    return {
        "generator": pick(count=args.count, site_count=args.site_count, sampler=args.sampler, seed=args.seed),
        "bytes_sent": pick(max=args.bytes_sent_max, mean=args.bytes_sent_mean, std_dev=args.bytes_sent_std_dev),
        "logging": pick(encoding=args.encoding, output=args.output),
    }


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        cfg = load_config(args.config, overrides_from_args(args))
        lg = get_logger(LOGGER_NAME, cfg["logging"]["encoding"], STREAMS[cfg["logging"]["output"]]())
    except ConfigError as e:
        print(f"accessloggen: {e}", file=sys.stderr)
        return 1
    try:
        run(cfg["generator"]["count"], cfg, logger=lg)
    except InvalidDistributionError as e:
        log_error(lg, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
