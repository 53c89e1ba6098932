from __future__ import annotations

from fastapi import FastAPI

from aftermarket.api.routes import after_market, health

app = FastAPI(title="after-market")

app.include_router(health.router, prefix="/api")
app.include_router(after_market.router, prefix="/api")
