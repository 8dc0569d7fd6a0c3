"""
BioForge API Server Entry Point

Local protocol planner: knowledge import, plan builder, protocol export and
tracking over a single persisted state blob.

  uvicorn main:app --host 0.0.0.0 --port $PORT
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bioforge import __version__
from bioforge.api import register_error_handlers, router
from bioforge.config import get_settings

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(levelname)s - %(message)s'
)

app = FastAPI(
    title="BioForge API",
    description="Evidence-graded protocol planner",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(router)
register_error_handlers(app)


@app.get("/")
def root():
    return {"service": "bioforge", "version": __version__, "docs": "/docs"}


# For local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
