"""FastAPI service for hierarchical name lookups.

This module exposes a name tree over HTTP. It provides:

- Exact match and longest prefix match lookups
- Insertion of new names with an attached entry
- JSON and plain text dumps of the tree
- LRU caching for frequent longest prefix lookups
- Prometheus metrics for monitoring
- Health check endpoint

The service loads names from a ';' separated file at startup. The tree itself
has no locking, so every access goes through one lock held by this module.

Typical usage:
    GET  /exact/{name}     - Exact match lookup
    GET  /longest/{name}   - Longest prefix match lookup
    POST /names            - Insert a name
    GET  /tree             - JSON dump of the tree
    GET  /tree/text        - Indented text dump of the tree
    GET  /health           - Health check
    GET  /metrics          - Prometheus metrics
"""

import logging
import os
import sys
import threading
import time
from functools import lru_cache
from typing import Any, Optional, Tuple

import uvicorn
from fastapi import FastAPI, HTTPException, Query
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.responses import PlainTextResponse, RedirectResponse, Response

from nametree.config import settings

# Local libraries
from nametree.lib.data import build_name_tree, get_df_polars, prep_df
from nametree.lib.models import (
    ExactMatchResponse,
    HealthResponse,
    InsertRequest,
    InsertResponse,
    LongestMatchResponse,
    validate_name,
)
from nametree.lib.name_tree import Node, new

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def load_tree(filename: str, root: str = "") -> Tuple[Node, int]:
    """Build the tree from a names file. Returns (tree, number of names read)."""
    if not os.path.exists(filename):
        logger.warning(f"Names file {filename} not found, starting with an empty tree")
        return new(root), 0

    logger.info(f"Loading names from {filename}")
    df = prep_df(get_df_polars(filename))
    logger.info(f"Loaded {len(df):,} names into DataFrame")
    return build_name_tree(df, root=root), len(df)


tree, names_loaded = load_tree(settings.names_file, settings.root_component)

# Thread safety lock for tree access
tree_lock = threading.RLock()
logger.info("Service initialization complete")

# Prometheus metrics
lookup_counter = Counter(
    "nametree_lookups_total", "Total number of name lookups", ["match_type", "status"]
)
lookup_latency = Histogram("nametree_lookup_latency_seconds", "Name lookup latency in seconds")
insert_counter = Counter("nametree_inserts_total", "Total number of name inserts", ["status"])
cache_hits = Counter("nametree_cache_hits_total", "Total number of cache hits")
cache_misses = Counter("nametree_cache_misses_total", "Total number of cache misses")
tree_size_gauge = Gauge("nametree_tree_size", "Current number of named nodes in the tree")
error_counter = Counter("nametree_errors_total", "Total number of errors", ["error_type"])

# Set initial size gauge
tree_size_gauge.set(tree.size())


# LRU cache for frequent lookups, cleared on every insert
@lru_cache(maxsize=settings.cache_size)
def cached_longest_match(name: str) -> Tuple[str, Any, bool]:
    """Cached longest prefix lookup. Returns (longest, entry, found)."""
    cache_misses.inc()
    with tree_lock:
        return tree.find_longest_match(name)


def get_cached_match(name: str) -> Tuple[str, Any, bool]:
    """Longest prefix lookup with cache statistics tracking."""
    misses_before = cached_longest_match.cache_info().misses
    result = cached_longest_match(name)
    if cached_longest_match.cache_info().misses == misses_before:
        cache_hits.inc()
    return result


def checked_name(name: str, match_type: str) -> str:
    """Turn a path parameter into a validated name or raise a 400."""
    full_name = "/" + name
    try:
        return validate_name(full_name)
    except ValueError as e:
        logger.warning(f"Invalid name in {match_type} lookup: {full_name!r}")
        error_counter.labels(error_type="invalid_name").inc()
        lookup_counter.labels(match_type=match_type, status="error").inc()
        raise HTTPException(status_code=400, detail=str(e)) from e


# Creat the API object
app = FastAPI(
    title="Name Tree API",
    description="Hierarchical name lookup service with exact and longest prefix matching over a name tree.",
    version="0.1.0",
)


@app.get("/", include_in_schema=False)
async def root():
    """
    Root endpoint - redirects to interactive API documentation.

    Returns:
        RedirectResponse to /docs (Swagger UI)
    """
    return RedirectResponse(url="/docs")


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """
    Prometheus metrics endpoint.

    Exposes operational metrics including:
    - nametree_lookups_total: Total number of lookups by match type and status
    - nametree_lookup_latency_seconds: Lookup latency histogram
    - nametree_inserts_total: Total inserts by status
    - nametree_cache_hits_total: Cache hit counter
    - nametree_cache_misses_total: Cache miss counter
    - nametree_tree_size: Current named node count
    - nametree_errors_total: Error counter by type

    Returns:
        Prometheus-formatted metrics in text/plain format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Health check endpoint for monitoring and load balancers. Returns name and node counts.",
)
async def health() -> HealthResponse:
    """Health check endpoint for monitoring and load balancers."""
    with tree_lock:
        size = tree.size()

    logger.debug(f"Health check: names={names_loaded}, size={size}")
    return HealthResponse(status="healthy", names_loaded=names_loaded, tree_size=size)


@app.get(
    "/exact/{name:path}",
    response_model=ExactMatchResponse,
    summary="Exact Match",
    description="""Look up a name that was inserted as is.

    The name is given without its leading slash: `/exact/a/b` looks up `/a/b`.

    Nodes created while inserting a longer name carry that name's entry, so
    `/a` matches exactly once `/a/b` has been inserted.
    """,
    responses={
        400: {"description": "Invalid name"},
        404: {"description": "Name not found"},
    },
)
async def exact_match(name: str) -> ExactMatchResponse:
    """
    Perform an exact match lookup.

    Args:
        name: Name without the leading slash (e.g. "a/b")

    Returns:
        ExactMatchResponse with the name and its entry

    Raises:
        HTTPException: 400 if the name is malformed, 404 if it is not in the tree
    """
    start_time = time.time()
    full_name = checked_name(name, "exact")

    with tree_lock:
        entry, found = tree.find_exact_match(full_name)

    lookup_latency.observe(time.time() - start_time)
    if not found:
        logger.info(f"No exact match for {full_name}")
        error_counter.labels(error_type="no_match").inc()
        lookup_counter.labels(match_type="exact", status="not_found").inc()
        raise HTTPException(status_code=404, detail="No match is found")

    lookup_counter.labels(match_type="exact", status="success").inc()
    logger.debug(f"Exact match {full_name} -> {entry}")
    return ExactMatchResponse(name=full_name, entry=entry)


@app.get(
    "/longest/{name:path}",
    response_model=LongestMatchResponse,
    summary="Longest Prefix Match",
    description="""Look up the longest prefix of a name present in the tree.

    On an exact match `longest` is the queried name. Otherwise it is the
    matched components joined with `/`, without the leading slash.
    """,
    responses={
        400: {"description": "Invalid name"},
        404: {"description": "No prefix of the name is in the tree"},
    },
)
async def longest_match(name: str) -> LongestMatchResponse:
    """
    Perform a longest prefix match lookup.

    Args:
        name: Name without the leading slash (e.g. "a/b/d")

    Returns:
        LongestMatchResponse with the longest prefix and its entry

    Raises:
        HTTPException: 400 if the name is malformed, 404 if nothing matched
    """
    start_time = time.time()
    full_name = checked_name(name, "longest")

    longest, entry, found = get_cached_match(full_name)

    lookup_latency.observe(time.time() - start_time)
    if not found:
        logger.info(f"No prefix found for {full_name}")
        error_counter.labels(error_type="no_match").inc()
        lookup_counter.labels(match_type="longest", status="not_found").inc()
        raise HTTPException(status_code=404, detail="No match is found")

    lookup_counter.labels(match_type="longest", status="success").inc()
    logger.debug(f"Longest match {full_name} -> {longest}")
    return LongestMatchResponse(
        name=full_name, longest=longest, entry=entry, exact=longest == full_name
    )


@app.post(
    "/names",
    response_model=InsertResponse,
    summary="Insert Name",
    description="""Insert a name with an entry.

    Every missing component of the name becomes a node carrying the entry.
    Inserting an existing name changes nothing, the first entry is kept.
    """,
    responses={422: {"description": "Malformed name or body"}},
)
async def insert_name(request: InsertRequest) -> InsertResponse:
    """
    Insert a name into the tree.

    Args:
        request: Name and entry to insert

    Returns:
        InsertResponse with the number of nodes created and the new tree size
    """
    with tree_lock:
        created = tree.insert(request.name, request.entry)
        size = tree.size()
        if created:
            # Clear cache since the tree changed
            cached_longest_match.cache_clear()

    status = "created" if created else "exists"
    insert_counter.labels(status=status).inc()
    tree_size_gauge.set(size)
    logger.info(f"Insert {request.name}: {status}, {created} nodes created")
    return InsertResponse(status=status, created_nodes=created, size=size)


@app.get("/tree", summary="Tree as JSON")
async def tree_json(indent: Optional[int] = Query(default=None, ge=0, le=8)) -> Response:
    """
    Dump the tree labels as JSON.

    Args:
        indent: Indent width, defaults to the JSON_INDENT setting
    """
    with tree_lock:
        body = tree.to_json(indent=settings.json_indent if indent is None else indent)
    return Response(content=body, media_type="application/json")


@app.get("/tree/text", summary="Tree as Text", response_class=PlainTextResponse)
async def tree_text() -> PlainTextResponse:
    """Dump the tree as indented text, one component per line."""
    with tree_lock:
        body = str(tree)
    return PlainTextResponse(body)


def main():
    """
    Entry point for running the service via command line.

    Starts the uvicorn server with configuration from settings.

    Usage:
        python -m nametree

    Environment Variables:
        HOST: Listen address (default: 0.0.0.0)
        PORT: Listen port (default: 5000)
        PROC_NUM: Number of worker processes (default: 1)
        NAMES_FILE: Names file loaded at startup (default: names.txt)
    """
    uvicorn.run(
        "nametree.main:app", host=settings.host, port=settings.port, workers=settings.proc_num
    )


if __name__ == "__main__":
    main()
