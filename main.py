from fastapi import FastAPI
from fastapi.responses import JSONResponse

from db import init_db
from models.errors import DataFetchError, EnumerationOverrunError, InvalidRuleError
from routes import projections, recurrences, transactions

app = FastAPI(title="Budget Projections")

app.include_router(projections.router)
app.include_router(recurrences.router)
app.include_router(transactions.router)


@app.on_event("startup")
def startup():
    init_db()


@app.get("/health")
def health():
    return {"status": "ok"}


# -----------------------------
# Error mapping
# -----------------------------
@app.exception_handler(InvalidRuleError)
async def invalid_rule_handler(request, exc: InvalidRuleError):
    return JSONResponse(status_code=422, content={"error": str(exc)})


@app.exception_handler(DataFetchError)
async def data_fetch_handler(request, exc: DataFetchError):
    return JSONResponse(status_code=503, content={"error": f"Data store unavailable: {exc}"})


@app.exception_handler(EnumerationOverrunError)
async def overrun_handler(request, exc: EnumerationOverrunError):
    return JSONResponse(status_code=500, content={"error": str(exc)})
