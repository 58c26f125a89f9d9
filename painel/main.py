import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from painel.api.v1.clientes import router as clientes_router
from painel.api.v1.doctor import router as doctor_router
from painel.api.v1.enderecos import router as enderecos_router
from painel.api.v1.maquinas import router as maquinas_router
from painel.api.v1.relatorios import router as relatorios_router
from painel.api.v1.solventes import router as solventes_router
from painel.api.v1.tintas import router as tintas_router
from painel.core.config import settings
from painel.core.firebase import credentials_configured
from painel.dashboard.router import router as dashboard_router

if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO)

logger = logging.getLogger("painel")

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="Painel administrativo - clientes, maquinas, relatorios e insumos",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    if settings.LOCAL_STORE:
        logger.warning("LOCAL_STORE=1: dados mantidos apenas em memoria.")
    elif not credentials_configured():
        logger.warning("Credenciais do Firebase nao configuradas.")
    if not settings.GOOGLE_MAPS_API_KEY:
        logger.warning("GOOGLE_MAPS_API_KEY ausente: autocomplete e distancia desativados.")
    if settings.ENV.lower() == "production" and settings.LOCAL_STORE:
        logger.warning("LOCAL_STORE ativo em producao.")


app.include_router(clientes_router, prefix="/api")
app.include_router(maquinas_router, prefix="/api")
app.include_router(relatorios_router, prefix="/api")
app.include_router(tintas_router, prefix="/api")
app.include_router(solventes_router, prefix="/api")
app.include_router(enderecos_router, prefix="/api")
app.include_router(doctor_router, prefix="/api")
app.include_router(dashboard_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "request method=%s path=%s status=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


@app.get("/api/health")
def health():
    return {"status": "ok"}
