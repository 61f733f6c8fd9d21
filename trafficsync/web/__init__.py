"""Web service: FastAPI app, auth, REST and live channel endpoints."""
