"""Application shell: CORS, request logging and ``/health``.

Grid endpoints depend on the caller's mapped models, so none are mounted here.
Build one per model with ``gridquery.api.datagrid.build_datagrid_router`` and
mount it with ``app.include_router``::

    app.include_router(build_datagrid_router(lambda db: db.query(Pet), path="/pets/query"))
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from gridquery.core.config import settings
from gridquery.core.request_logging import install_request_logging

app = FastAPI(title=settings.APP_NAME, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_request_logging(app)

@app.get("/health")
def health():
    return {"status": "ok"}
