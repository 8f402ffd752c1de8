import logging
from fastapi import FastAPI, HTTPException

from resmap_api.config import LOG_LEVEL, MAX_GRID_CELLS, N_JOBS
from resmap_api.schemas import (
    EvaluateRequest, EvaluateResponse, GridOut, LineariseRequest, LineariseResponse,
    PairRow, PhysicsRequest, PhysicsResponse, ScanRequest, ScanResponse, finite_or_none,
)
from resmap_engine import (
    EngineError, ScanSettings, compute_column_physics, evaluate_point, fit_linear,
    optimize, resolution_table, resolve_scan_settings,
)

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="resmap API")


def _engine_error(e: EngineError) -> HTTPException:
    logger.info("request rejected: %s", e)
    return HTTPException(status_code=400, detail=e.to_dict())


@app.get("/")
def root():
    return {"service": "resmap", "ok": True}


@app.get("/ping")
def ping():
    return {"ok": True}


@app.post("/physics", response_model=PhysicsResponse)
def physics(req: PhysicsRequest):
    try:
        p = compute_column_physics(req.column_length, req.column_diameter, req.flow_rate)
    except EngineError as e:
        raise _engine_error(e)
    return PhysicsResponse(mobile_phase_volume=p.mobile_phase_volume,
                           dead_time=p.dead_time, linear_velocity=p.linear_velocity)


@app.post("/evaluate", response_model=EvaluateResponse)
def evaluate(req: EvaluateRequest):
    try:
        params = req.parameters.to_engine()
        results = evaluate_point(params, req.x, req.y, req.z)
        pairs = None
        if req.include_pairs:
            table = resolution_table(results.retention_factors, params.plate_number, names=req.names)
            pairs = [PairRow(pair=r.pair, k1=r.k1, k2=r.k2, Rs=finite_or_none(r.Rs))
                     for r in table.itertuples(index=False)]
    except EngineError as e:
        raise _engine_error(e)
    return EvaluateResponse.from_results(results, pairs=pairs)


@app.post("/scan", response_model=ScanResponse)
def scan(req: ScanRequest):
    try:
        params = req.parameters.to_engine()
        settings = resolve_scan_settings(
            req.settings.model_dump(exclude_none=True),
            base=ScanSettings(n_jobs=N_JOBS, max_cells=MAX_GRID_CELLS),
        )
        logger.info("scan: %d variables, %d components, objective=%s",
                    params.number_of_variables, params.number_of_components, settings.objective_mode)
        results, grid = optimize(params, settings)
    except EngineError as e:
        raise _engine_error(e)

    grid_out = None
    if req.include_grid:
        grid_out = GridOut(
            xs=grid.xs.tolist(), ys=grid.ys.tolist(), zs=grid.zs.tolist(),
            resolution=[[[finite_or_none(v) for v in row] for row in plane] for plane in grid.resolution],
        )
    return ScanResponse(
        optimum=EvaluateResponse.from_results(results),
        optimal_resolution=finite_or_none(grid.optimal_resolution),
        degenerate_cells=grid.degenerate_cells,
        grid=grid_out,
    )


@app.post("/linearise", response_model=LineariseResponse)
def linearise(req: LineariseRequest):
    try:
        fit = fit_linear(req.variable_type, req.range1, req.range2, req.values1, req.values2, req.pka)
    except EngineError as e:
        raise _engine_error(e)
    return LineariseResponse(coefficients_a=fit.a.tolist(), coefficients_b=fit.b.tolist())
