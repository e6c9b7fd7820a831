"""
Pipeline DAG Backend - FastAPI Application

This is the HTTP entry point used by the pipeline editor.
It provides:
- DAG validation for the status panel
- Layered auto-arrange for the "auto layout" action
- Connection point and edge path helpers for edge drawing
- CORS configuration for local frontend development

Every endpoint is stateless: the editor sends the current graph each time.
"""
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from pipeline_core import (
    PipelineData, LayoutRequest,
    ConnectionPointRequest, EdgePathRequest,
    validate, layout, connection_point, edge_path
)
from pipeline_core.config import CORS_ORIGINS

logger = logging.getLogger(__name__)


# --- FastAPI App ---

app = FastAPI(
    title="Pipeline DAG API",
    description="Validation and auto-layout for the pipeline editor",
    version="1.0.0",
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Health Check ---

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


# --- Validation ---

@app.post("/api/validate")
async def validate_pipeline(request: PipelineData):
    """Check that the pipeline is a connected DAG."""
    result = validate(request.nodes, request.edges)
    if not result.is_valid:
        logger.info("Pipeline invalid: %s", "; ".join(result.errors))
    return result.to_dict()


# --- Layout ---

@app.post("/api/layout")
async def layout_pipeline(request: LayoutRequest):
    """Auto-arrange the pipeline; only node positions change."""
    nodes = layout(request.nodes, request.edges, request.config)
    return {"success": True, "nodes": [n.model_dump() for n in nodes]}


# --- Geometry ---

@app.post("/api/connection-point")
async def get_connection_point(request: ConnectionPointRequest):
    """Get the anchor point of a node's input or output port."""
    try:
        point = connection_point(request.position, request.side, request.width, request.height)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return point.model_dump()


@app.post("/api/edge-path")
async def get_edge_path(request: EdgePathRequest):
    """Get the SVG curve between two anchor points."""
    return {"path": edge_path(request.source, request.target)}


# --- Run with uvicorn ---

if __name__ == "__main__":
    import uvicorn
    from pipeline_core.config import HOST, PORT, configure_logging
    configure_logging()
    uvicorn.run(app, host=HOST, port=PORT)
