from contextlib import asynccontextmanager
import logging
import threading
from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse

from service.tempchart.base import logging_config as _  # configure logging

from service.tempchart import render as rp
from service.tempchart import viewport as vp
from service.tempchart.base.errors import EmptyDatasetError, RetrievalError
from service.tempchart.cache import RecencyCache
from service.tempchart.charts import charts
from service.tempchart.charts import svg
from service.tempchart.charts import vega
from service.tempchart.env import ServerOptions
from service.tempchart.models import Dataset, StationMeta, Viewport
from service.tempchart.sources import (
    DataSource,
    FileDataSource,
    HttpDataSource,
    SyntheticDataSource,
)


logger = logging.getLogger("app")


def _create_source(options: ServerOptions) -> DataSource:
    if options.data_url:
        logger.info("Reading data from %s", options.data_url)
        return HttpDataSource(options.data_url)
    logger.info("Reading data from directory %s", options.data_dir)
    return FileDataSource(options.data_dir)


@asynccontextmanager
async def lifespan(app: FastAPI):
    options = ServerOptions.from_env()
    source = _create_source(options)
    fallback = None
    if options.offline:
        logger.info("Offline mode: substituting synthetic data on retrieval errors")
        fallback = SyntheticDataSource(seed=options.seed)

    app.state.options = options
    app.state.source = source
    app.state.fallback = fallback
    app.state.cache = RecencyCache(
        source.fetch_year,
        capacity=options.cache_size,
        fallback=fallback.fetch_year if fallback else None,
    )
    # RecencyCache expects its callers to serialize requests.
    app.state.cache_lock = threading.Lock()

    yield

    logger.info("Shutting down")


# Always create the app, we're running this thing with uvicorn ONLY.
app = FastAPI(lifespan=lifespan)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def _get_dataset(station_id: str, year: int) -> Dataset:
    with app.state.cache_lock:
        return app.state.cache.get(station_id, year)


@app.exception_handler(RetrievalError)
async def retrieval_error_handler(request, exc: RetrievalError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(EmptyDatasetError)
async def empty_dataset_handler(request, exc: EmptyDatasetError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.get("/health")
def health():
    """Health check endpoint for cloud deployments."""
    return {"status": "ok"}


@app.get("/stations/{station_id}/meta")
def get_station_meta(station_id: str):
    try:
        meta: StationMeta = app.state.source.fetch_meta(station_id)
    except RetrievalError:
        if app.state.fallback is None:
            raise
        meta = app.state.fallback.fetch_meta(station_id)
    return meta.to_wire()


@app.get("/stations/{station_id}/years/{year}")
def get_year_data(station_id: str, year: int):
    return _get_dataset(station_id, year).to_wire()


@app.get("/stations/{station_id}/years/{year}/chart.svg")
def get_year_chart_svg(
    station_id: str,
    year: int,
    width: int = 800,
    height: int = 400,
    start: float | None = None,
    count: float | None = None,
    selected: int | None = None,
):
    """Renders the requested window of a station-year as SVG.

    start and count are in (fractional) days and are clamped to the data,
    like the interactive chart clamps its viewport.
    """
    if width <= 0 or height <= 0:
        raise _bad_request(f"Invalid chart size: {width}x{height}")

    dataset = _get_dataset(station_id, year)
    total = len(dataset.days)
    view = vp.load(Viewport(), total)
    if count is not None:
        view = view.model_copy(
            update={"visible_count": max(view.min_visible, count)}
        )
    if start is not None:
        view = view.model_copy(update={"start_index": start})
    view = vp.clamp(view, total)

    frame = rp.render(dataset, view, selected, width, height)
    return Response(
        content=svg.frame_to_svg(frame, width, height),
        media_type="image/svg+xml",
    )


@app.get("/stations/{station_id}/years/{year}/chart")
def get_year_chart(
    request: Request,
    station_id: str,
    year: int,
    start: int = 0,
    end: int | None = None,
    selected: int | None = None,
):
    dataset = _get_dataset(station_id, year)
    try:
        chart = charts.candle_chart(
            dataset, start=start, end=end, selected_index=selected
        )
    except ValueError as e:
        raise _bad_request(str(e))

    spec = chart.to_dict()
    if "text/html" in request.headers.get("accept", ""):
        return HTMLResponse(content=vega.chart_html(spec))
    return JSONResponse(content={"vega_spec": spec})
