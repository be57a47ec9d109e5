import os, re, time, tempfile
from datetime import datetime
from functools import lru_cache

from flask import Blueprint, request, jsonify
from redis import Redis
from rq import Queue
from rq.job import Job
from rq.exceptions import NoSuchJobError

from primesearch import ConfigError, LowPrimeTable, SearchConfig, run_search, miller_rabin
from primesearch.low_primes import DEFAULT_TABLE_SIZE
from primesearch.randomness import LockedStream
from primesearch.miller_rabin import MIN_ROUNDS, MAX_ROUNDS
from search_worker import raise_output_error

search_bp = Blueprint("search_bp", __name__)

# Redis / RQ
redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
redis_conn = Redis.from_url(redis_url)
primes_q = Queue("primes", connection=redis_conn, default_timeout=60*60*12)  # 12h

MAX_API_DIGITS = int(os.getenv("MAX_API_DIGITS", "400"))
MAX_API_COUNT  = int(os.getenv("MAX_API_COUNT", "16"))
MAX_JOB_DIGITS = int(os.getenv("MAX_JOB_DIGITS", "5000"))
MAX_JOB_COUNT  = int(os.getenv("MAX_JOB_COUNT", "1000"))

# ------------------ helpers ------------------
class BadParams(ValueError):
    pass

_INT_RE = re.compile(r"-?[0-9]+")

def _int(data: dict, name: str, default=None) -> int:
    raw = data.get(name, default)
    if raw is None or str(raw).strip() == "":
        if default is None:
            raise BadParams(f"missing {name}")
        return int(default)
    s = str(raw).strip()
    # ASCII digits only; str.isdigit() also accepts superscripts int() rejects
    if not _INT_RE.fullmatch(s):
        raise BadParams(f"{name} must be an integer")
    return int(s)

def _search_params(data: dict) -> dict:
    return {
        "count": _int(data, "count", 1),
        "digits": _int(data, "digits"),
        "rounds": _int(data, "rounds", 8),
        "seed": _int(data, "seed", int(time.time())),
        "table_size": _int(data, "table_size", DEFAULT_TABLE_SIZE),
    }

@lru_cache(maxsize=4)
def _table(size: int) -> LowPrimeTable:
    return LowPrimeTable.generate(size)

def _age_secs(dt: datetime | None) -> float | None:
    if not dt:
        return None
    return max(0.0, time.time() - dt.timestamp())

def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None

def _job_dict(job: Job) -> dict:
    meta = job.meta or {}
    d = {
        "job_id": job.id,
        "status": job.get_status(),
        "found": meta.get("found", 0),
        "count": meta.get("count"),
        "meta": meta,
        "enqueued_at": _iso(job.enqueued_at),
        "started_at": _iso(job.started_at),
        "ended_at": _iso(job.ended_at),
        "age_sec": _age_secs(job.enqueued_at),
    }
    if job.is_finished:
        # rq >= 1.12 has return_value(); older releases only .result
        res = job.return_value() if hasattr(job, "return_value") else job.result
        d["result"] = res
        if isinstance(res, dict):
            d["found"] = res.get("found", d["found"])
    if job.is_failed:
        d["exc_info"] = (job.exc_info or "")[-1024:]
    return d

# ------------------ API ------------------
@search_bp.get("/api/health")
def health():
    ok, msg = True, "ok"
    try:
        redis_conn.ping()
    except Exception as e:
        ok, msg = False, f"redis error: {e.__class__.__name__}"
    size = primes_q.count if ok else None
    return jsonify({"ok": ok, "msg": msg, "queue": {"name": primes_q.name, "size": size}, "time": int(time.time())})

@search_bp.post("/api/test")
def api_test():
    data = request.get_json(force=True, silent=True) or {}
    try:
        n = _int(data, "n")
        rounds = _int(data, "rounds", 8)
        seed = _int(data, "seed", int(time.time()))
    except BadParams as e:
        return jsonify({"error": str(e)}), 400
    if n <= 4 or n % 2 == 0:
        return jsonify({"error": "n must be odd and greater than 4"}), 400
    if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
        return jsonify({"error": f"rounds must be in [{MIN_ROUNDS}, {MAX_ROUNDS}]"}), 400
    if seed < 0:
        return jsonify({"error": "seed must be >= 0"}), 400
    verdict = miller_rabin(n, rounds, LockedStream(seed))
    return jsonify({"n": str(n), "rounds": rounds, "seed": seed, "bits": n.bit_length(),
                    "probable_prime": verdict, "verdict": "probable prime" if verdict else "composite"})

@search_bp.post("/api/search")
def api_search():
    data = request.get_json(force=True, silent=True) or {}
    try:
        p = _search_params(data)
    except BadParams as e:
        return jsonify({"error": str(e)}), 400
    if p["count"] > MAX_API_COUNT or p["digits"] > MAX_API_DIGITS:
        return jsonify({"error": f"Synchronous search is capped at {MAX_API_COUNT} primes of {MAX_API_DIGITS} digits; use /api/search/submit."}), 400
    with tempfile.TemporaryDirectory(prefix="primesearch-") as tmp:
        try:
            cfg = SearchConfig(output=os.path.join(tmp, "primes.txt"), **p).validate()
        except ConfigError as e:
            return jsonify({"error": str(e)}), 400
        rep = run_search(cfg, table=_table(cfg.table_size), on_found=lambda i, prime: None,
                         on_fatal=raise_output_error)
    return jsonify({"count": rep.requested, "found": rep.found, "digits": cfg.digits, "rounds": cfg.rounds,
                    "seed": cfg.seed, "candidates_tested": rep.candidates_tested,
                    "search_ms": int(rep.search_seconds * 1000), "primes": [str(x) for x in rep.primes]})

@search_bp.post("/api/search/submit")
def search_submit():
    data = request.get_json(silent=True) or {}
    try:
        p = _search_params(data)
        SearchConfig(output="-", **p).validate()
    except (BadParams, ConfigError) as e:
        return jsonify({"error": str(e)}), 400
    if p["digits"] > MAX_JOB_DIGITS:
        return jsonify({"error": f"Max {MAX_JOB_DIGITS} digits per job."}), 400
    if p["count"] > MAX_JOB_COUNT:
        return jsonify({"error": f"Max {MAX_JOB_COUNT} primes per job."}), 400

    job = primes_q.enqueue("search_worker.find_primes_job", p["count"], p["digits"], p["rounds"],
                           p["seed"], p["table_size"],
                           meta={"found": 0, "count": p["count"], "digits": p["digits"], "submitted": time.time()})
    ids = primes_q.get_job_ids()
    pos = ids.index(job.id) + 1 if job.id in ids else 1
    return jsonify({"job_id": job.id, "status": job.get_status(), "seed": p["seed"], "queue_position": pos})

@search_bp.get("/api/job/<job_id>")
def job_status(job_id):
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except NoSuchJobError:
        return jsonify({"error": "unknown job"}), 404
    return jsonify(_job_dict(job))
