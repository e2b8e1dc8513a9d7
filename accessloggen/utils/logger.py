import json, logging, sys
from datetime import datetime
from accessloggen.utils.errors import ConfigError

TIME_KEY = "time"


def format_time(created: float) -> str:
    """2006-01-02T15:04:05Z0700 style: local time, no fraction, Z for UTC."""
    ts = datetime.fromtimestamp(created).astimezone()
    off = ts.strftime("%z")
    return ts.strftime("%Y-%m-%dT%H:%M:%S") + ("Z" if off in ("+0000", "-0000", "") else off)


def _escape(v) -> str:
    return str(v).replace("\\", "\\\\").replace("\t", "\\t").replace("\n", "\\n")


class LTSVFormatter(logging.Formatter):
    # time:...<TAB>label:value...; message, level and caller are never written
    def format(self, record):
        fields = getattr(record, "fields", None) or {}
        parts = [f"{TIME_KEY}:{format_time(record.created)}"]
        parts += [f"{k}:{_escape(v)}" for k, v in fields.items()]
        return "\t".join(parts)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        out = {TIME_KEY: format_time(record.created)}
        out.update(getattr(record, "fields", None) or {})
        return json.dumps(out, ensure_ascii=False, separators=(",", ":"))


FORMATTERS = {"ltsv": LTSVFormatter, "json": JSONFormatter}
STREAMS = {"stderr": lambda: sys.stderr, "stdout": lambda: sys.stdout}


def get_logger(name: str, encoding: str = "ltsv", stream=None) -> logging.Logger:
    if encoding not in FORMATTERS:
        raise ConfigError(f"unknown log encoding: {encoding!r}")
    lg = logging.getLogger(name)
    # only our own handler is reconfigured; handlers added by others are left alone
    h = next((h for h in lg.handlers if getattr(h, "fields_sink", False)), None)
    if h is None:
        h = logging.StreamHandler()
        h.fields_sink = True
        lg.addHandler(h)
    h.setStream(stream if stream is not None else sys.stderr)
    h.setFormatter(FORMATTERS[encoding]())
    lg.setLevel(logging.INFO)
    lg.propagate = False
    return lg


def log_fields(lg: logging.Logger, fields: dict, level: int = logging.INFO):
    lg.log(level, "", extra={"fields": fields})


def log_error(lg: logging.Logger, err: BaseException):
    log_fields(lg, {"error": str(err)}, logging.ERROR)
