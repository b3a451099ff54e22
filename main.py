from fastapi import FastAPI
from shared.observability import setup_observability

from services.auth_service.main import auth_app
from services.storefront_service.main import storefront_app
from services.order_service.main import order_app
from services.courier_service.main import courier_app
from services.product_service.main import product_app
from services.export_service.main import export_app
from services.analytics_service.main import analytics_app

app = FastAPI(title="Back-office Cluster")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, "backoffice_gateway")

@app.get("/health")
async def health_check():
    return {"service": "cluster", "status": "running"}

app.mount("/auth", auth_app)
app.mount("/storefront", storefront_app)
app.mount("/orders", order_app)
app.mount("/courier", courier_app)
app.mount("/products", product_app)
app.mount("/exports", export_app)
app.mount("/analytics", analytics_app)
