import os, time

from rq import get_current_job

from primesearch import SearchConfig, run_search, prepare_output
from primesearch.low_primes import DEFAULT_TABLE_SIZE

OUT_DIR = os.getenv("PRIMES_OUT_DIR", "results")

# ---- helpers ----------------------------------------------------------------

def _out_path(job_id, seed):
    os.makedirs(OUT_DIR, exist_ok=True)
    name = f"{job_id}.txt" if job_id else f"primes-{seed}.txt"
    return os.path.join(OUT_DIR, name)

def raise_output_error(err):
    # inside a queued job an unwritable output fails the job instead of the worker process
    raise err

# ---- Public RQ job -----------------------------------------------------------

def find_primes_job(count, digits, rounds=8, seed=None, table_size=DEFAULT_TABLE_SIZE, workers=None):
    """
    One independent search per job:
      1) truncate <PRIMES_OUT_DIR>/<job id>.txt
      2) run the sieved Miller-Rabin search, recording progress in job.meta
    Returns: dict with primes (as strings), counts and timings
    """
    job = get_current_job()
    seed = int(time.time()) if seed is None else int(seed)
    cfg = SearchConfig(output=_out_path(job.id if job else None, seed), count=int(count),
                       digits=int(digits), rounds=int(rounds), seed=seed,
                       table_size=int(table_size), workers=workers).validate()
    prepare_output(cfg.output, append=False)

    def progress(index, prime):
        if job is not None:
            job.meta["found"] = index
            job.meta["updated"] = time.time()
            job.save_meta()

    rep = run_search(cfg, on_found=progress, on_fatal=raise_output_error)
    return {
        "count": rep.requested,
        "found": rep.found,
        "digits": cfg.digits,
        "rounds": cfg.rounds,
        "seed": cfg.seed,
        "output": cfg.output,
        "candidates_tested": rep.candidates_tested,
        "init_s": round(rep.init_seconds, 6),
        "search_s": round(rep.search_seconds, 6),
        "primes": [str(p) for p in rep.primes],
    }
